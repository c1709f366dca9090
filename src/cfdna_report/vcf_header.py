"""Repair malformed ``##INFO`` header lines written by the Oncomine cfDNA pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from cfdna_report.extractors.common import iter_lines

MALFORMED_INFO_FIELDS: tuple[str, ...] = (
    "MOL_RATIO_TO_WILD_TYPE",
    "NORM_COUNT_WITHIN_GENE",
    "RATIO_TO_WILD_TYPE",
    "NORM_MOL_COUNT_WITHIN_GENE",
)

_INFO_BODY_RE = re.compile(r"##INFO=<(.*)>")
_PAIR_RE = re.compile(r"(\w+=[^,]+)")
_TRAILING_QUOTE_RE = re.compile(r' "$')


def fix_info_line(line: str) -> str:
    """Rebuild an ``##INFO`` line from its ``key=value`` pairs only."""

    body_match = _INFO_BODY_RE.search(line)
    body = body_match.group(1) if body_match else line
    pairs = _PAIR_RE.findall(body)
    if not pairs:
        return line
    pairs[-1] = _TRAILING_QUOTE_RE.sub('."', pairs[-1])
    if pairs[-1].count('"') == 1:
        # description was cut at an embedded comma
        pairs[-1] += '"'
    return "##INFO=<" + ",".join(pairs) + ">"


def default_output_path(vcf_path: str | Path) -> Path:
    path = Path(vcf_path)
    if ".vcf" in path.name:
        return path.with_name(path.name.replace(".vcf", "_fixed.vcf", 1))
    return path.with_name(path.stem + "_fixed" + path.suffix)


@dataclass
class HeaderFixReport:
    header_lines: int
    fixed_lines: int
    variant_lines: int
    output_path: Path


class VcfHeaderFixer:
    """Copy a VCF, rewriting header lines that mention known malformed INFO fields."""

    def __init__(self, bad_fields: tuple[str, ...] = MALFORMED_INFO_FIELDS) -> None:
        self.bad_fields = bad_fields

    def needs_fix(self, line: str) -> bool:
        return line.startswith("#") and any(field in line for field in self.bad_fields)

    def fix(self, vcf_path: str | Path, output_path: str | Path | None = None) -> HeaderFixReport:
        target = Path(output_path) if output_path else default_output_path(vcf_path)
        if target.resolve() == Path(vcf_path).resolve():
            raise ValueError(f"Refusing to overwrite the input file {vcf_path}")
        header: list[str] = []
        variants: list[str] = []
        fixed = 0

        for line in iter_lines(vcf_path):
            if line.startswith("#"):
                if self.needs_fix(line):
                    line = fix_info_line(line)
                    fixed += 1
                header.append(line)
            else:
                variants.append(line)

        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as stream:
            for line in header + variants:
                stream.write(line + "\n")

        return HeaderFixReport(
            header_lines=len(header),
            fixed_lines=fixed,
            variant_lines=len(variants),
            output_path=target,
        )
