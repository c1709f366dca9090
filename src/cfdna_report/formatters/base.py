"""Formatter interface for cfDNA report outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TextIO

from cfdna_report.formatters.layouts import ReportLayout
from cfdna_report.models import ReportRow, SampleIdentity

RowsBySample = Mapping[SampleIdentity, Sequence[ReportRow]]


class ReportFormatter(ABC):
    """Renders filtered per-sample rows to a text stream."""

    def __init__(self, layout: ReportLayout) -> None:
        self.layout = layout

    @abstractmethod
    def render(self, rows_by_sample: RowsBySample, stream: TextIO) -> None:
        """Write the report for every sample, in mapping order."""
