"""Parallel per-file extraction and the single fan-in merge."""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

from cfdna_report.config import ConfigurationError
from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.models import ResultFragment, ResultSet, SampleIdentity

MAX_WORKERS = 48


def extract_file(extractor: RecordExtractor, path: Path) -> ResultFragment:
    """Per-file worker. Runs in a pool process and shares nothing with siblings."""

    return extractor.extract(Path(path))


@dataclass(frozen=True)
class WorkerFailure:
    """A worker that raised instead of returning a fragment."""

    source: Path
    error: str


@dataclass(frozen=True)
class IdentityCollision:
    """Two files resolved to the same sample identity; ``kept`` replaced ``replaced``."""

    identity: SampleIdentity
    kept: Path
    replaced: Path


@dataclass
class DispatchReport:
    """Merged results and diagnostics for one dispatch."""

    result_set: ResultSet = field(default_factory=dict)
    controls: dict[SampleIdentity, dict[str, str]] = field(default_factory=dict)
    sources: dict[SampleIdentity, Path] = field(default_factory=dict)
    failures: list[WorkerFailure] = field(default_factory=list)
    collisions: list[IdentityCollision] = field(default_factory=list)
    skipped_lines: int = 0


Outcome = Union[ResultFragment, WorkerFailure]


class ParallelDispatcher:
    """Run one extractor over many files with bounded concurrency, then merge.

    Workers return owned fragments. The merge happens once, after every worker
    has finished, and walks fragments in input order so the outcome never
    depends on completion order.
    """

    def __init__(self, *, max_workers: int = MAX_WORKERS, logger: logging.Logger | None = None) -> None:
        if not 1 <= max_workers <= MAX_WORKERS:
            raise ConfigurationError(f"max_workers must be between 1 and {MAX_WORKERS}, got {max_workers}")
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger("cfdna_report.dispatch")

    def run(self, extractor: RecordExtractor, paths: Iterable[str | Path]) -> DispatchReport:
        sources = [Path(path) for path in paths]
        workers = min(self.max_workers, len(sources))

        if workers <= 1:
            outcomes = [self._extract_inline(extractor, source) for source in sources]
        else:
            outcomes = self._extract_parallel(extractor, sources, workers)

        return self.merge(outcomes)

    def _extract_inline(self, extractor: RecordExtractor, source: Path) -> Outcome:
        try:
            return extract_file(extractor, source)
        except Exception as exc:
            return self._failure(source, exc)

    def _extract_parallel(
        self,
        extractor: RecordExtractor,
        sources: list[Path],
        workers: int,
    ) -> list[Outcome]:
        outcomes: list[Outcome | None] = [None] * len(sources)
        self.logger.info("Dispatching %d files across %d workers", len(sources), workers)

        with concurrent.futures.ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(extract_file, extractor, source): index
                for index, source in enumerate(sources)
            }
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    outcomes[index] = future.result()
                except Exception as exc:
                    outcomes[index] = self._failure(sources[index], exc)

        return [outcome for outcome in outcomes if outcome is not None]

    def _failure(self, source: Path, exc: Exception) -> WorkerFailure:
        self.logger.error("Worker failed for %s: %s", source, exc)
        return WorkerFailure(source=source, error=f"{type(exc).__name__}: {exc}")

    def merge(self, outcomes: Iterable[Outcome]) -> DispatchReport:
        """Fold fragments into one ResultSet keyed by sample identity.

        A missing identity falls back to the file's base name. On collision the
        later fragment wins and the overwrite is logged.
        """

        report = DispatchReport()
        for outcome in outcomes:
            if isinstance(outcome, WorkerFailure):
                report.failures.append(outcome)
                continue

            identity = outcome.identity or SampleIdentity.from_path(outcome.source)
            if identity in report.result_set:
                previous = report.sources[identity]
                self.logger.warning(
                    "Sample identity %s from %s replaces results from %s",
                    identity.text(),
                    outcome.source,
                    previous,
                )
                report.collisions.append(
                    IdentityCollision(identity=identity, kept=outcome.source, replaced=previous)
                )

            report.result_set[identity] = outcome.records
            report.sources[identity] = outcome.source
            if outcome.controls:
                report.controls[identity] = outcome.controls
            else:
                report.controls.pop(identity, None)
            report.skipped_lines += outcome.skipped_lines

        return report
