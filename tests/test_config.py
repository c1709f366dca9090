import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from cfdna_report import (  # noqa: E402
    CnvThresholds,
    ConfigurationError,
    OutputFormat,
    ThresholdMode,
    build_filter_criteria,
    parse_gene_list,
)
from cfdna_report.sorting import version_key  # noqa: E402


def test_output_format_parse_accepts_known_values() -> None:
    assert OutputFormat.parse("pp") is OutputFormat.PRETTY
    assert OutputFormat.parse("CSV") is OutputFormat.CSV
    assert OutputFormat.parse(None) is OutputFormat.PRETTY
    assert OutputFormat.TSV.delimiter == "\t"


def test_output_format_parse_rejects_unknown_value() -> None:
    with pytest.raises(ConfigurationError, match="not a valid output format"):
        OutputFormat.parse("xml")


def test_threshold_mode_requires_complete_pair() -> None:
    assert CnvThresholds().mode() is ThresholdMode.NONE
    assert CnvThresholds(copy_amp=4).mode() is ThresholdMode.NONE
    assert CnvThresholds(copy_amp=4, copy_loss=1).mode() is ThresholdMode.COPY_NUMBER
    assert CnvThresholds(fold_amp=1.5, fold_loss=0.5).mode() is ThresholdMode.FOLD_DIFFERENCE
    # a lone fold value does not conflict with a copy pair
    assert CnvThresholds(copy_amp=4, copy_loss=1, fold_amp=1.5).mode() is ThresholdMode.COPY_NUMBER


def test_conflicting_threshold_pairs_fail_configuration() -> None:
    thresholds = CnvThresholds(copy_amp=4, copy_loss=1, fold_amp=1.5, fold_loss=0.5)

    with pytest.raises(ConfigurationError, match="both the fold difference and copy number"):
        build_filter_criteria(thresholds=thresholds)


def test_build_filter_criteria_resolves_mode_and_options() -> None:
    criteria = build_filter_criteria(
        genes="MYC, ERBB2,,",
        thresholds=CnvThresholds(copy_amp=4, copy_loss=1),
        min_tiles=5,
        include_nocall=False,
    )

    assert criteria.genes == frozenset({"MYC", "ERBB2"})
    assert criteria.threshold_mode is ThresholdMode.COPY_NUMBER
    assert criteria.min_tiles == 5
    assert criteria.include_nocall is False
    assert criteria.allows_gene("MYC")
    assert not criteria.allows_gene("myc")
    assert criteria.describe()["genes"] == "ERBB2,MYC"


def test_empty_gene_list_allows_everything() -> None:
    criteria = build_filter_criteria()

    assert criteria.allows_gene("ANYTHING")
    assert criteria.allows_gene(None)


def test_parse_gene_list_can_uppercase() -> None:
    assert parse_gene_list("egfr,Alk", upper=True) == frozenset({"EGFR", "ALK"})
    assert parse_gene_list(["KRAS", " "]) == frozenset({"KRAS"})
    assert parse_gene_list(None) == frozenset()


def test_version_key_orders_numeric_runs_naturally() -> None:
    names = ["chr10:100", "chr2:5000", "chrX:1", "chr1:20", "chr1:3"]

    assert sorted(names, key=version_key) == ["chr1:3", "chr1:20", "chr2:5000", "chr10:100", "chrX:1"]
    assert sorted(["sample10", "sample9", "Sample1"], key=version_key) == ["Sample1", "sample9", "sample10"]
