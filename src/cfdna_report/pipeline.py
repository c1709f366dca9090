"""Composable report pipeline: dispatch, filter, format."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, TextIO

from cfdna_report.config import FilterCriteria, OutputFormat
from cfdna_report.dispatch import DispatchReport, ParallelDispatcher, WorkerFailure
from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.filters import FilterEngine, build_record_filter
from cfdna_report.formatters import LAYOUTS, RawCsvFormatter, ReportFormatter, TableFormatter
from cfdna_report.models import RecordType


@dataclass
class ReportRunSummary:
    """Execution summary for one report run."""

    input_files: int
    samples: int
    reported_rows: int
    failures: list[WorkerFailure] = field(default_factory=list)
    collisions: int = 0
    rejections: dict[str, int] = field(default_factory=dict)


def build_formatter(
    record_type: RecordType,
    *,
    output_format: OutputFormat = OutputFormat.PRETTY,
    raw: bool = False,
    genes: Iterable[str] = (),
) -> ReportFormatter:
    layout = LAYOUTS[record_type]
    if raw:
        return RawCsvFormatter(layout)
    return TableFormatter(layout, output_format, genes=",".join(sorted(genes)))


class ReportPipeline:
    """Run per-file extraction in parallel, then filtering and formatting in order."""

    def __init__(
        self,
        *,
        extractor: RecordExtractor,
        criteria: FilterCriteria,
        formatter: ReportFormatter,
        dispatcher: ParallelDispatcher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.extractor = extractor
        self.criteria = criteria
        self.formatter = formatter
        self.dispatcher = dispatcher or ParallelDispatcher()
        self.logger = logger or logging.getLogger("cfdna_report.pipeline")

    def run(self, paths: Iterable[str | Path], stream: TextIO) -> ReportRunSummary:
        sources = [Path(path) for path in paths]
        self.logger.debug("Filters being employed: %s", self.criteria.describe())

        dispatch = self.dispatcher.run(self.extractor, sources)
        self._log_samples(dispatch)

        engine = FilterEngine(build_record_filter(self.extractor.record_type, self.criteria))
        rows_by_sample = engine.apply(dispatch.result_set)
        self.formatter.render(rows_by_sample, stream)

        return ReportRunSummary(
            input_files=len(sources),
            samples=len(rows_by_sample),
            reported_rows=sum(len(rows) for rows in rows_by_sample.values()),
            failures=list(dispatch.failures),
            collisions=len(dispatch.collisions),
            rejections=dict(engine.rejections),
        )

    def _log_samples(self, dispatch: DispatchReport) -> None:
        for identity, records in dispatch.result_set.items():
            self.logger.debug(
                "Sample %s from %s: %d candidate records, metadata=%s",
                identity.name,
                dispatch.sources[identity],
                len(records),
                dict(identity.metadata),
            )
            controls = dispatch.controls.get(identity)
            if controls:
                self.logger.debug("Sample %s controls: %s", identity.name, controls)
        if dispatch.skipped_lines:
            self.logger.debug("Skipped %d malformed lines", dispatch.skipped_lines)
