"""Copy number variant extraction from cfDNA CNV plugin VCFs."""

from __future__ import annotations

from pathlib import Path

from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.extractors.common import HeaderScanner, compile_metadata, iter_lines
from cfdna_report.models import RecordType, ResultFragment, SampleIdentity, VariantKey

CNV_ALT = "<CNV>"
CNV_FIELDS: tuple[str, ...] = (
    "END",
    "LEN",
    "NUMTILES",
    "CN",
    "FD",
    "HS",
    "FUNC",
    "PVAL",
    "RMMDP",
    "MMDP",
    "FILTER",
)
CNV_METADATA_LABELS: tuple[str, ...] = ("Gender", "MAPD", "Cellularity")

# VCF columns: CHROM POS ID REF ALT QUAL FILTER INFO FORMAT SAMPLE
_MIN_COLUMNS = 10


def _assumed_gender(value: str) -> str:
    return "Male" if value == "m" else "Female"


CNV_HEADER_PATTERNS = (
    compile_metadata("Gender", r"sampleGender=(\w+)"),
    compile_metadata("Gender", r"AssumedGender=([mf])", _assumed_gender),
    compile_metadata("MAPD", r"mapd=(\d\.\d+)"),
    compile_metadata("Cellularity", r"CellularityAsAFractionBetween0-1=(.*)$"),
)


def normalize_info(info: str) -> dict[str, str]:
    """Parse a CNV INFO column into a map.

    ``HS`` is written as a bare flag and some producers leave ``SD`` without a
    value; bare tokens become ``HS=Yes`` and ``KEY=NA`` respectively.
    """

    fields: dict[str, str] = {}
    for token in info.split(";"):
        token = token.strip()
        if not token:
            continue
        key, sep, value = token.partition("=")
        if not sep:
            value = "Yes" if key == "HS" else "NA"
        fields[key] = value
    return fields


class CnvExtractor(RecordExtractor):
    """Extract ``<CNV>`` records keyed by ``chr:start:gene:ref``."""

    record_type = RecordType.CNV
    vocabulary = CNV_FIELDS
    sentinels = {
        "HS": "No",
        "FUNC": ".",
        "FILTER": ".",
        **{name: "0" for name in ("END", "LEN", "NUMTILES", "CN", "FD", "PVAL", "RMMDP", "MMDP")},
    }

    def extract(self, path: Path) -> ResultFragment:
        scanner = HeaderScanner(CNV_HEADER_PATTERNS)
        fragment = ResultFragment(source=Path(path), record_type=self.record_type, identity=None)

        for line in iter_lines(path):
            if not line.strip() or scanner.feed(line):
                continue

            columns = line.split()
            if len(columns) < _MIN_COLUMNS:
                fragment.skipped_lines += 1
                continue
            if columns[4] != CNV_ALT:
                continue

            fields = normalize_info(columns[7])
            fields["CN"] = columns[9].rsplit(":", 1)[-1]
            fields["FILTER"] = columns[6]
            key = VariantKey(parts=tuple(columns[0:4]))
            fragment.records[key] = self.complete(fields)

        fragment.identity = self.identity(scanner)
        return fragment

    @staticmethod
    def identity(scanner: HeaderScanner) -> SampleIdentity | None:
        if not scanner.sample_name:
            return None
        return SampleIdentity(
            name=scanner.sample_name,
            metadata=tuple((label, scanner.get(label)) for label in CNV_METADATA_LABELS),
        )
