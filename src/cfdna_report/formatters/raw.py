"""Flattened CSV export for spreadsheet import."""

from __future__ import annotations

from typing import TextIO

import pandas as pd

from cfdna_report.formatters.base import ReportFormatter, RowsBySample


class RawCsvFormatter(ReportFormatter):
    """Single global header, then one row per record with sample metadata leading."""

    def columns(self) -> list[str]:
        return ["Sample", *self.layout.raw_metadata_labels, *self.layout.header]

    def render(self, rows_by_sample: RowsBySample, stream: TextIO) -> None:
        labels = self.layout.raw_metadata_labels
        records = [
            (identity.name, *(identity.get(label) for label in labels), *row)
            for identity, rows in rows_by_sample.items()
            for row in rows
        ]

        frame = pd.DataFrame.from_records(records, columns=self.columns())
        frame.to_csv(stream, index=False, lineterminator="\n")
