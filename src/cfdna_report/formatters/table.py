"""Per-sample pretty-printed and delimited tables."""

from __future__ import annotations

from typing import TextIO

import pandas as pd

from cfdna_report.config import OutputFormat
from cfdna_report.formatters.base import ReportFormatter, RowsBySample
from cfdna_report.formatters.layouts import DYNAMIC_PAD, MIN_DYNAMIC_WIDTH, ReportLayout


def column_widths(layout: ReportLayout, rows_by_sample: RowsBySample) -> list[int]:
    """Resolve pretty-print widths.

    Dynamic columns take the longest value across every sample plus padding, so
    all sample sections line up.
    """

    widths: list[int] = []
    for index, column in enumerate(layout.columns):
        if not column.dynamic:
            widths.append(column.width or 0)
            continue
        width = MIN_DYNAMIC_WIDTH
        for rows in rows_by_sample.values():
            for row in rows:
                width = max(width, len(row[index]) + DYNAMIC_PAD)
        widths.append(width)
    return widths


class TableFormatter(ReportFormatter):
    """One banner, header and table per sample; zero-row samples get an explicit marker."""

    def __init__(
        self,
        layout: ReportLayout,
        output_format: OutputFormat = OutputFormat.PRETTY,
        *,
        genes: str = "",
    ) -> None:
        super().__init__(layout)
        self.output_format = output_format
        self.genes = genes

    def render(self, rows_by_sample: RowsBySample, stream: TextIO) -> None:
        widths = column_widths(self.layout, rows_by_sample)

        for identity, rows in rows_by_sample.items():
            stream.write(self.layout.banner(identity, self.genes) + "\n")
            if self.output_format is OutputFormat.PRETTY:
                stream.write(self._padded(self.layout.header, widths) + "\n")
                for row in rows:
                    stream.write(self._padded(row, widths) + "\n")
            else:
                self._write_delimited(rows, stream)
            if not rows:
                stream.write(self.layout.empty_marker + "\n")
            stream.write("\n")

    def _padded(self, values: tuple[str, ...], widths: list[int]) -> str:
        return " ".join(str(value).ljust(width) for value, width in zip(values, widths))

    def _write_delimited(self, rows, stream: TextIO) -> None:
        """Header plus rows, quoting values that contain the delimiter (e.g. ``FOO,BAR`` partners)."""

        frame = pd.DataFrame.from_records(list(rows), columns=list(self.layout.header))
        frame.to_csv(stream, sep=self.output_format.delimiter, index=False, lineterminator="\n")
