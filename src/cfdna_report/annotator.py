"""Wrapper around the external ``vcfExtractor.pl`` annotation utility."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from cfdna_report.config import ConfigurationError
from cfdna_report.profiles import ExternalToolSpec

VERSION_RE = re.compile(r"v(\d+\.\d+\.(?:\d+_)?\d{6})")


class ToolRequirementError(ConfigurationError):
    """The external tool is missing or older than the required version."""


class ExternalToolError(RuntimeError):
    """The external tool failed while processing one input file."""


def parse_tool_version(output: str) -> tuple[int, int] | None:
    """Extract ``(major, minor)`` from version output such as ``v8.1.0_112017``."""

    for line in output.splitlines():
        match = VERSION_RE.search(line)
        if match is None:
            continue
        major, minor = re.split(r"[._]", match.group(1))[:2]
        return int(major), int(minor)
    return None


@dataclass(frozen=True)
class VcfExtractorTool:
    """Declared collaborator: VCF path and gene filter in, tabular variant lines out.

    :meth:`ensure_available` is the precondition every run checks before any
    input file is processed.
    """

    executable: str = "vcfExtractor.pl"
    min_version: tuple[int, int] = (7, 9)
    arguments: tuple[str, ...] = ("-Nnac",)

    @classmethod
    def from_spec(cls, spec: ExternalToolSpec) -> "VcfExtractorTool":
        return cls(
            executable=spec.executable,
            min_version=spec.min_version,
            arguments=spec.arguments or cls.arguments,
        )

    def resolve(self) -> str:
        located = shutil.which(self.executable)
        if located is None:
            raise ToolRequirementError(
                f"'{self.executable}' is not in your path. Please install this required utility "
                "from https://github.com/drmrgd/biofx_utils and try again."
            )
        return located

    def version(self) -> tuple[int, int]:
        result = subprocess.run(
            [self.resolve(), "-v"],
            text=True,
            capture_output=True,
            check=False,
        )
        found = parse_tool_version(result.stdout + "\n" + result.stderr)
        if found is None:
            raise ToolRequirementError(
                f"Could not determine the version of '{self.executable}' from its -v output."
            )
        return found

    def ensure_available(self) -> tuple[int, int]:
        current = self.version()
        if current < self.min_version:
            required = ".".join(str(part) for part in self.min_version)
            raise ToolRequirementError(
                f"{self.executable} version (v{current[0]}.{current[1]}) is too old for cfDNA "
                f"data analysis; v{required} or newer is required. Update from "
                "https://github.com/drmrgd/biofx_utils."
            )
        return current

    def command(self, vcf_path: str | Path, genes: Iterable[str] = ()) -> list[str]:
        command = [self.executable, *self.arguments]
        gene_list = sorted(genes)
        if gene_list:
            command.extend(["-g", ",".join(gene_list)])
        command.append(str(vcf_path))
        return command

    def iter_lines(self, vcf_path: str | Path, genes: Iterable[str] = ()) -> Iterator[str]:
        command = self.command(vcf_path, genes)
        result = subprocess.run(command, text=True, capture_output=True, check=False)
        if result.returncode != 0:
            raise ExternalToolError(
                f"{self.executable} exited with status {result.returncode} for {vcf_path}: "
                f"{result.stderr.strip()}"
            )
        yield from result.stdout.splitlines()
