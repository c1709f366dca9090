"""Base interface for all per-file record extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

from cfdna_report.models import FieldSet, RecordType, ResultFragment


class RecordExtractor(ABC):
    """Parse one VCF file into keyed FieldSets plus the file's sample identity."""

    record_type: RecordType
    vocabulary: tuple[str, ...] = ()
    sentinels: Mapping[str, str] = {}

    @abstractmethod
    def extract(self, path: Path) -> ResultFragment:
        """Read ``path`` and return its result fragment."""

    def complete(self, values: Mapping[str, str]) -> FieldSet:
        """Project ``values`` onto the vocabulary, filling sentinels for gaps."""

        return {
            name: values[name] if values.get(name) not in (None, "") else self.sentinels.get(name, ".")
            for name in self.vocabulary
        }
