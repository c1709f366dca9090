#!/usr/bin/env python3
"""Report gene fusions from cfDNA fusion pipeline VCF files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from cfdna_report import (  # noqa: E402
    ConfigurationError,
    FusionExtractor,
    OutputFormat,
    ParallelDispatcher,
    ReportProfileLoader,
    build_filter_criteria,
    parse_gene_list,
)
from cfdna_report.cli import (  # noqa: E402
    add_output_arguments,
    build_parser,
    configure_logging,
    missing_inputs,
    run_report,
)
from cfdna_report.extractors import canonical_gene_names  # noqa: E402


def parse_args(argv: list[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = build_parser(
        "cfdna_fusion_report.py",
        "Print out results of the cfDNA fusion pipeline.",
    )
    group = parser.add_argument_group("filter options")
    group.add_argument("-g", "--gene", default=None,
                       help="Only report fusions with this driver gene, or a comma separated list.")
    group.add_argument("-t", "--threshold", type=int, default=None,
                       help="Only report fusions with at least this many reads (default: 2).")
    group.add_argument("-R", "--Ref", dest="include_reference", action="store_true", default=None,
                       help="Include reference (zero count or FAIL) calls.")
    group.add_argument("-n", "--novel", dest="include_novel", action="store_true", default=None,
                       help="Include 'Non-Targeted' and novel fusions.")
    group.add_argument("-N", "--NOCALL", dest="include_nocall", action="store_true", default=None,
                       help="Include NOCALL fusions.")
    add_output_arguments(parser)
    return parser, parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    parser, args = parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("cfdna_report.fusion")

    try:
        profile = ReportProfileLoader().load("fusion")
        criteria = build_filter_criteria(
            genes=canonical_gene_names(parse_gene_list(args.gene)),
            **profile.criteria_options(
                read_threshold=args.threshold,
                include_reference=args.include_reference,
                include_novel=args.include_novel,
                include_nocall=args.include_nocall,
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
        extractor=FusionExtractor(),
        criteria=criteria,
        output_format=output_format,
        dispatcher=dispatcher,
        logger=logger,
    )


if __name__ == "__main__":
    raise SystemExit(main())
