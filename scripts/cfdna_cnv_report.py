#!/usr/bin/env python3
"""Report copy number variants from cfDNA panel VCF files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from cfdna_report import (  # noqa: E402
    CnvExtractor,
    CnvThresholds,
    ConfigurationError,
    OutputFormat,
    ParallelDispatcher,
    ReportProfileLoader,
    build_filter_criteria,
)
from cfdna_report.cli import (  # noqa: E402
    add_output_arguments,
    build_parser,
    configure_logging,
    missing_inputs,
    run_report,
)


def parse_args(argv: list[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = build_parser("cfdna_cnv_report.py", "cfDNA CNV parser.")
    group = parser.add_argument_group("filter options")
    group.add_argument("--copy_amp", "--amp", type=float, default=0.0,
                       help="Only report copy gain above this threshold (default: %(default)s).")
    group.add_argument("--copy_loss", "--loss", type=float, default=0.0,
                       help="Only report copy loss below this threshold (default: %(default)s).")
    group.add_argument("--fold_amp", type=float, default=0.0,
                       help="Only report fold amplification above this threshold (default: %(default)s).")
    group.add_argument("--fold_loss", type=float, default=0.0,
                       help="Only report fold loss below this threshold (default: %(default)s).")
    group.add_argument("-g", "--gene", default=None,
                       help="Only report this gene, or a comma separated list of genes.")
    group.add_argument("-t", "--tiles", type=int, default=None,
                       help="Only report CNVs covering at least this many tiles.")
    group.add_argument("-N", "--NOCALL", dest="exclude_nocall", action="store_true",
                       help="Do not output NOCALL results.")
    add_output_arguments(parser)
    return parser, parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    parser, args = parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("cfdna_report.cnv")

    try:
        profile = ReportProfileLoader().load("cnv")
        criteria = build_filter_criteria(
            genes=args.gene,
            thresholds=CnvThresholds(
                copy_amp=args.copy_amp,
                copy_loss=args.copy_loss,
                fold_amp=args.fold_amp,
                fold_loss=args.fold_loss,
            ),
            **profile.criteria_options(
                min_tiles=args.tiles,
                include_nocall=False if args.exclude_nocall else None,
            ),
        )
        output_format = OutputFormat.parse(args.format)
        dispatcher = ParallelDispatcher(max_workers=args.jobs, logger=logger)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1

    if not args.vcfs:
        return missing_inputs(parser, logger)

    return run_report(
        args,
        extractor=CnvExtractor(),
        criteria=criteria,
        output_format=output_format,
        dispatcher=dispatcher,
        logger=logger,
    )


if __name__ == "__main__":
    raise SystemExit(main())
