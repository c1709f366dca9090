"""Column layouts, banners and empty-sample markers per record type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from cfdna_report.models import RecordType, SampleIdentity

MIN_DYNAMIC_WIDTH = 4
DYNAMIC_PAD = 2


@dataclass(frozen=True)
class Column:
    """Output column. ``width=None`` sizes to the longest value; ``0`` means no padding."""

    label: str
    width: int | None = 0

    @property
    def dynamic(self) -> bool:
        return self.width is None


BannerFactory = Callable[[SampleIdentity, str], str]


@dataclass(frozen=True)
class ReportLayout:
    record_type: RecordType
    columns: tuple[Column, ...]
    banner: BannerFactory
    empty_marker: str
    raw_metadata_labels: tuple[str, ...] = ()

    @property
    def header(self) -> tuple[str, ...]:
        return tuple(column.label for column in self.columns)


def _cnv_banner(identity: SampleIdentity, genes: str) -> str:
    return (
        f"::: CNV Data For {identity.name} (Gender: {identity.get('Gender')}, "
        f"Cellularity: {identity.get('Cellularity')}, MAPD: {identity.get('MAPD')}) :::"
    )


def _fusion_banner(identity: SampleIdentity, genes: str) -> str:
    prefix = f"{genes} " if genes else ""
    return f"::: {prefix}Fusions in {identity.name} :::"


def _snv_indel_banner(identity: SampleIdentity, genes: str) -> str:
    timestamp = identity.get("Timestamp")
    suffix = f" (Timestamp: {timestamp})" if timestamp else ""
    return f"::: SNV/Indel Data For {identity.name}{suffix} :::"


CNV_LAYOUT = ReportLayout(
    record_type=RecordType.CNV,
    columns=(
        Column("Chr", 8),
        Column("Gene", 8),
        Column("Start", 11),
        Column("End", 11),
        Column("Length", 11),
        Column("Tiles", 8),
        Column("CN", 8),
        Column("FD", 8),
        Column("p-val", 8),
        Column("Med_Mol_Cov", 14),
        Column("Med_Read_Cov", 14),
    ),
    banner=_cnv_banner,
    empty_marker=">>>>  No Reportable CNVs Found in Sample  <<<<",
    raw_metadata_labels=("Gender", "MAPD", "Cellularity"),
)

FUSION_LAYOUT = ReportLayout(
    record_type=RecordType.FUSION,
    columns=(
        Column("Fusion", None),
        Column("ID", 12),
        Column("Read_Count", 12),
        Column("Driver_Gene", 15),
        Column("Partner_Gene", 15),
    ),
    banner=_fusion_banner,
    empty_marker="<<< No Fusions Detected >>>",
)

SNV_INDEL_LAYOUT = ReportLayout(
    record_type=RecordType.SNV_INDEL,
    columns=(
        Column("Chr:Position", 17),
        Column("Ref", None),
        Column("Alt", None),
        Column("VAF", 9),
        Column("LOD", 7),
        Column("AmpCov", 8),
        Column("MolRefCov", 11),
        Column("MolAltCov", 11),
        Column("VarID", None),
        Column("Gene", 10),
        Column("Transcript", 15),
        Column("CDS", None),
        Column("AA", None),
        Column("Location", 12),
        Column("Function", 9),
        Column("oncomineGeneClass", 21),
        Column("oncomineVariantClass", 0),
    ),
    banner=_snv_indel_banner,
    empty_marker=">>>>  No Reportable SNVs or Indels Found in Sample  <<<<",
)

LAYOUTS: dict[RecordType, ReportLayout] = {
    RecordType.CNV: CNV_LAYOUT,
    RecordType.FUSION: FUSION_LAYOUT,
    RecordType.SNV_INDEL: SNV_INDEL_LAYOUT,
}
