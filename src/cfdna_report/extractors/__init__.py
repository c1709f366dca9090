"""Per-file record extractors for cfDNA VCFs."""

from .base import RecordExtractor
from .cnv import CNV_FIELDS, CnvExtractor
from .fusion import DRIVER_GENES, FUSION_FIELDS, FusionExtractor, canonical_gene_names, resolve_driver
from .snv_indel import SNV_INDEL_SCHEMA, SnvIndelExtractor

__all__ = [
    "RecordExtractor",
    "CNV_FIELDS",
    "CnvExtractor",
    "DRIVER_GENES",
    "FUSION_FIELDS",
    "FusionExtractor",
    "canonical_gene_names",
    "resolve_driver",
    "SNV_INDEL_SCHEMA",
    "SnvIndelExtractor",
]
