#!/usr/bin/env python3
"""Fix malformed INFO header lines in Oncomine cfDNA VCF files.

Current cfDNA VCFs do not conform to the VCF standard and make standard tools
such as VCFtools throw warnings. The header lines for a handful of INFO fields
are rebuilt from their ``key=value`` pairs; everything else is copied as-is.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from cfdna_report import VcfHeaderFixer, __version__  # noqa: E402
from cfdna_report.cli import configure_logging  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fix_vcf_header.py", description=__doc__.splitlines()[0])
    parser.add_argument("vcf", nargs="?", help="VCF file to fix.")
    parser.add_argument("-o", "--output", default=None,
                        help="Output file. Default is <VCF>_fixed.vcf.")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s - v{__version__}")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("cfdna_report.fix_header")

    if not args.vcf:
        logger.error("Not enough arguments passed to script!")
        return 1

    try:
        report = VcfHeaderFixer().fix(args.vcf, args.output)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Wrote %s: header=%d fixed=%d variants=%d",
        report.output_path,
        report.header_lines,
        report.fixed_lines,
        report.variant_lines,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
