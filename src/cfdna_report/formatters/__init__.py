"""Report formatters for cfDNA outputs."""

from .base import ReportFormatter
from .layouts import CNV_LAYOUT, FUSION_LAYOUT, LAYOUTS, SNV_INDEL_LAYOUT, Column, ReportLayout
from .raw import RawCsvFormatter
from .table import TableFormatter, column_widths

__all__ = [
    "ReportFormatter",
    "Column",
    "ReportLayout",
    "CNV_LAYOUT",
    "FUSION_LAYOUT",
    "SNV_INDEL_LAYOUT",
    "LAYOUTS",
    "RawCsvFormatter",
    "TableFormatter",
    "column_widths",
]
