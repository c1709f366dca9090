"""Argument and output plumbing shared by the report scripts."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import Iterator, TextIO

from cfdna_report import __version__
from cfdna_report.config import FilterCriteria, OutputFormat
from cfdna_report.dispatch import MAX_WORKERS, ParallelDispatcher
from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.pipeline import ReportPipeline, build_formatter

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def build_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("vcfs", nargs="*", metavar="VCF", help="Input VCF file(s).")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s - v{__version__}",
    )
    return parser


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("output options")
    group.add_argument(
        "-o",
        "--output",
        default=None,
        help="Send output to this file instead of STDOUT.",
    )
    group.add_argument(
        "-f",
        "--format",
        default=OutputFormat.PRETTY.value,
        help="Output format: 'csv', 'tsv', or pretty print 'pp' (default: %(default)s).",
    )
    group.add_argument(
        "-r",
        "--raw",
        action="store_true",
        help="Flattened CSV with sample metadata on every row, for spreadsheet import.",
    )
    group.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=MAX_WORKERS,
        help=f"Files processed in parallel (1-{MAX_WORKERS}, default: %(default)s).",
    )
    group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: %(default)s).",
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def missing_inputs(parser: argparse.ArgumentParser, logger: logging.Logger) -> int:
    logger.error("No VCF files passed to script!")
    parser.print_usage(sys.stderr)
    return 1


@contextlib.contextmanager
def open_output(path: str | Path | None, logger: logging.Logger) -> Iterator[TextIO]:
    if not path:
        yield sys.stdout
        return

    target = Path(path)
    logger.info("Writing data to %s", target)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as stream:
        yield stream


def run_report(
    args: argparse.Namespace,
    *,
    extractor: RecordExtractor,
    criteria: FilterCriteria,
    output_format: OutputFormat,
    dispatcher: ParallelDispatcher,
    logger: logging.Logger,
) -> int:
    formatter = build_formatter(
        extractor.record_type,
        output_format=output_format,
        raw=args.raw,
        genes=criteria.genes,
    )
    pipeline = ReportPipeline(
        extractor=extractor,
        criteria=criteria,
        formatter=formatter,
        dispatcher=dispatcher,
        logger=logger,
    )

    with open_output(args.output, logger) as stream:
        summary = pipeline.run(args.vcfs, stream)

    logger.info(
        "Report complete: files=%d samples=%d rows=%d failures=%d collisions=%d",
        summary.input_files,
        summary.samples,
        summary.reported_rows,
        len(summary.failures),
        summary.collisions,
    )
    for failure in summary.failures:
        logger.warning("No results for %s (%s)", failure.source, failure.error)
    return 0
