"""Shared utilities for line-oriented VCF record extractors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Pattern

MetadataTransform = Callable[[str], str]


def iter_lines(path: str | Path) -> Iterator[str]:
    """Yield lines without trailing newlines. ``OSError`` propagates to the caller."""

    with Path(path).open("r", encoding="utf-8", errors="replace") as stream:
        for line in stream:
            yield line.rstrip("\r\n")


def is_meta_header(line: str) -> bool:
    return line.startswith("##")


def is_column_header(line: str) -> bool:
    return line.startswith("#") and not line.startswith("##")


@dataclass(frozen=True)
class MetadataPattern:
    """Regex that captures one metadata value from a ``##`` header line."""

    key: str
    pattern: Pattern[str]
    transform: MetadataTransform | None = None


class HeaderScanner:
    """Collect ``key=value`` metadata embedded in VCF meta-header lines.

    Every pattern is tried on every ``##`` line; the last match for a key wins.
    The sample column name is taken from the last field of the ``#CHROM`` line.
    """

    def __init__(self, patterns: tuple[MetadataPattern, ...] = ()) -> None:
        self.patterns = patterns
        self.values: dict[str, str] = {}
        self.sample_name: str | None = None

    def feed(self, line: str) -> bool:
        """Consume a header line. Returns False for data lines."""

        if is_meta_header(line):
            for item in self.patterns:
                match = item.pattern.search(line)
                if match is None:
                    continue
                value = match.group(1).strip()
                self.values[item.key] = item.transform(value) if item.transform else value
            return True

        if is_column_header(line):
            columns = line.split()
            if len(columns) > 1:
                self.sample_name = columns[-1]
            return True

        return False

    def get(self, key: str, default: str = "NA") -> str:
        return self.values.get(key) or default


@dataclass(frozen=True)
class SchemaField:
    """One positional column of a tabular record."""

    name: str
    kind: type = str
    required: bool = True
    default: str = "."


class RecordSchema:
    """Ordered field list used to decode whitespace-split records.

    Decoding checks the column count before touching any field, and checks that
    typed columns convert cleanly. FieldSets keep the source text so reports
    print values exactly as the upstream tool wrote them.
    """

    def __init__(self, fields: tuple[SchemaField, ...]) -> None:
        self.fields = fields
        self.names = tuple(item.name for item in fields)
        self.required_count = sum(1 for item in fields if item.required)
        self._by_name = {item.name: item for item in fields}

    def decode(self, tokens: list[str]) -> dict[str, str] | None:
        if len(tokens) < self.required_count:
            return None

        record: dict[str, str] = {}
        for index, item in enumerate(self.fields):
            value = tokens[index] if index < len(tokens) else item.default
            if item.kind is not str and index < len(tokens):
                try:
                    item.kind(value)
                except (TypeError, ValueError):
                    return None
            record[item.name] = value
        return record

    def typed(self, record: Mapping[str, str], name: str) -> Any:
        return self._by_name[name].kind(record[name])


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def first_group(pattern: Pattern[str], text: str, default: str | None = None) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else default


def compile_metadata(key: str, regex: str, transform: MetadataTransform | None = None) -> MetadataPattern:
    return MetadataPattern(key=key, pattern=re.compile(regex), transform=transform)
