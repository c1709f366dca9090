#!/usr/bin/env python3
"""Report SNVs and indels from cfDNA panel VCF files.

Records come from ``vcfExtractor.pl`` (v7.9 or newer), which must be on PATH.
The cfDNA baseline filters (VAF above LOD, alt molecular coverage, known
variant id) are applied before any user filter.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from cfdna_report import (  # noqa: E402
    ConfigurationError,
    OutputFormat,
    ParallelDispatcher,
    ReportProfileLoader,
    SnvIndelExtractor,
    VcfExtractorTool,
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
    parser = build_parser(
        "cfdna_snv_indel_report.py",
        "Generate a report of SNVs and Indels reported from the cfDNA panel.",
    )
    group = parser.add_argument_group("filter options")
    group.add_argument("-g", "--gene", default=None,
                       help="Only report this gene, or a comma separated list of genes.")
    group.add_argument("--min-vaf", type=float, default=None,
                       help="Only report variants with at least this VAF.")
    group.add_argument("--min-alt-cov", type=int, default=None,
                       help="Drop variants with alt molecular coverage at or below this value (default: 1).")
    add_output_arguments(parser)
    return parser, parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    parser, args = parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("cfdna_report.snv_indel")

    try:
        profile = ReportProfileLoader().load("snv_indel")
        criteria = build_filter_criteria(
            genes=args.gene,
            **profile.criteria_options(min_vaf=args.min_vaf, min_alt_mol_cov=args.min_alt_cov),
        )
        output_format = OutputFormat.parse(args.format)
        dispatcher = ParallelDispatcher(max_workers=args.jobs, logger=logger)
        if not args.vcfs:
            return missing_inputs(parser, logger)

        tool = VcfExtractorTool.from_spec(profile.external_tool) if profile.external_tool else VcfExtractorTool()
        version = tool.ensure_available()
        logger.info("Using %s v%d.%d", tool.executable, *version)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1

    extractor = SnvIndelExtractor(
        tool,
        genes=criteria.genes,
        min_alt_mol_cov=criteria.min_alt_mol_cov,
    )
    return run_report(
        args,
        extractor=extractor,
        criteria=criteria,
        output_format=output_format,
        dispatcher=dispatcher,
        logger=logger,
    )


if __name__ == "__main__":
    raise SystemExit(main())
