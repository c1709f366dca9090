"""In-memory data models shared by extractors, filters and formatters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Tuple

from cfdna_report.sorting import version_key

FieldSet = Dict[str, str]
ReportRow = Tuple[str, ...]


class RecordType(str, Enum):
    """Variant categories a report can be built for."""

    CNV = "cnv"
    FUSION = "fusion"
    SNV_INDEL = "snv_indel"


@dataclass(frozen=True)
class VariantKey:
    """Composite identity of one variant within a sample.

    ``parts`` keeps the source fields separately so projections never need to
    re-split the joined text.
    """

    parts: tuple[str, ...]
    separator: str = ":"

    @property
    def text(self) -> str:
        return self.separator.join(self.parts)

    def sort_key(self) -> list[str | int]:
        return version_key(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SampleIdentity:
    """Top-level grouping key for one input file's results."""

    name: str
    metadata: tuple[tuple[str, str], ...] = ()

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(value for _, value in self.metadata)

    def get(self, label: str, default: str = "") -> str:
        for key, value in self.metadata:
            if key == label:
                return value
        return default

    def text(self) -> str:
        """Colon-joined identity, e.g. ``sample:Female:0.12:0.3``."""

        return ":".join((self.name, *self.values))

    def sort_key(self) -> list[str | int]:
        return version_key(self.text())

    @classmethod
    def from_path(cls, path: str | Path) -> "SampleIdentity":
        return cls(name=Path(path).name)


@dataclass
class ResultFragment:
    """Self-contained output of one per-file worker."""

    source: Path
    record_type: RecordType
    identity: SampleIdentity | None
    records: dict[VariantKey, FieldSet] = field(default_factory=dict)
    controls: dict[str, str] = field(default_factory=dict)
    skipped_lines: int = 0


ResultSet = Dict[SampleIdentity, Dict[VariantKey, FieldSet]]
