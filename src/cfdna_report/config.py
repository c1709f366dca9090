"""Run configuration contracts for cfDNA reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class ConfigurationError(ValueError):
    """Raised for invalid run configuration, before any input file is opened."""


class OutputFormat(str, Enum):
    """Table rendering modes selectable with ``--format``."""

    PRETTY = "pp"
    CSV = "csv"
    TSV = "tsv"

    @property
    def delimiter(self) -> str:
        return DELIMITERS[self]

    @classmethod
    def parse(cls, value: str | None) -> "OutputFormat":
        if not value:
            return cls.PRETTY
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"'{value}' is not a valid output format. Choose one of: "
                f"{', '.join(item.value for item in cls)}"
            ) from None


DELIMITERS: dict[OutputFormat, str] = {
    OutputFormat.PRETTY: "",
    OutputFormat.CSV: ",",
    OutputFormat.TSV: "\t",
}


class ThresholdMode(str, Enum):
    """Which numeric CNV threshold pair is active for a run."""

    NONE = "none"
    FOLD_DIFFERENCE = "fold_difference"
    COPY_NUMBER = "copy_number"


@dataclass(frozen=True)
class CnvThresholds:
    """Amplification/loss cutoffs. Zero means unset."""

    copy_amp: float = 0.0
    copy_loss: float = 0.0
    fold_amp: float = 0.0
    fold_loss: float = 0.0

    @property
    def has_copy_pair(self) -> bool:
        return bool(self.copy_amp and self.copy_loss)

    @property
    def has_fold_pair(self) -> bool:
        return bool(self.fold_amp and self.fold_loss)

    def mode(self) -> ThresholdMode:
        """Select the active threshold mode.

        Only a complete pair activates a mode; a lone amp or loss value is ignored.
        """

        if self.has_fold_pair and self.has_copy_pair:
            raise ConfigurationError(
                "You can not use both the fold difference and copy number thresholds "
                "for filtering. Please use just one or the other."
            )
        if self.has_fold_pair:
            return ThresholdMode.FOLD_DIFFERENCE
        if self.has_copy_pair:
            return ThresholdMode.COPY_NUMBER
        return ThresholdMode.NONE


@dataclass(frozen=True)
class FilterCriteria:
    """Immutable filter settings for one report run."""

    genes: frozenset[str] = field(default_factory=frozenset)
    thresholds: CnvThresholds = field(default_factory=CnvThresholds)
    threshold_mode: ThresholdMode = ThresholdMode.NONE
    pvalue_cutoff: float = 5e-5
    min_tiles: int | None = None
    read_threshold: int = 2
    min_vaf: float | None = None
    min_alt_mol_cov: int = 1
    include_nocall: bool = True
    include_novel: bool = False
    include_reference: bool = False

    def allows_gene(self, gene: str | None) -> bool:
        """Exact, case-sensitive allow-list check; an empty list allows everything."""

        return not self.genes or gene in self.genes

    def describe(self) -> dict[str, object]:
        return {
            "genes": ",".join(sorted(self.genes)) or None,
            "threshold_mode": self.threshold_mode.value,
            "copy_amp": self.thresholds.copy_amp,
            "copy_loss": self.thresholds.copy_loss,
            "fold_amp": self.thresholds.fold_amp,
            "fold_loss": self.thresholds.fold_loss,
            "pvalue_cutoff": self.pvalue_cutoff,
            "min_tiles": self.min_tiles,
            "read_threshold": self.read_threshold,
            "min_vaf": self.min_vaf,
            "min_alt_mol_cov": self.min_alt_mol_cov,
            "include_nocall": self.include_nocall,
            "include_novel": self.include_novel,
            "include_reference": self.include_reference,
        }


def parse_gene_list(value: str | Iterable[str] | None, *, upper: bool = False) -> frozenset[str]:
    """Split a comma separated gene list, dropping blanks."""

    if value is None:
        return frozenset()
    items = value.split(",") if isinstance(value, str) else list(value)
    genes = {item.strip() for item in items if item and item.strip()}
    if upper:
        genes = {gene.upper() for gene in genes}
    return frozenset(genes)


def build_filter_criteria(
    *,
    genes: str | Iterable[str] | None = None,
    upper_genes: bool = False,
    thresholds: CnvThresholds | None = None,
    **options: object,
) -> FilterCriteria:
    """Construct criteria, resolving the threshold mode once.

    Raises :class:`ConfigurationError` when both threshold pairs are supplied.
    """

    thresholds = thresholds or CnvThresholds()
    return FilterCriteria(
        genes=parse_gene_list(genes, upper=upper_genes),
        thresholds=thresholds,
        threshold_mode=thresholds.mode(),
        **options,
    )
