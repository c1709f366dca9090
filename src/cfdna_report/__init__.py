"""Report generators for cfDNA panel VCF outputs.

The package splits each report into per-file extraction, a parallel dispatch
and merge, per-sample filtering, and table formatting.
"""

__version__ = "0.8.0"

from .annotator import ExternalToolError, ToolRequirementError, VcfExtractorTool
from .config import (
    CnvThresholds,
    ConfigurationError,
    FilterCriteria,
    OutputFormat,
    ThresholdMode,
    build_filter_criteria,
    parse_gene_list,
)
from .dispatch import MAX_WORKERS, DispatchReport, ParallelDispatcher
from .extractors import CnvExtractor, FusionExtractor, RecordExtractor, SnvIndelExtractor
from .filters import FilterEngine, build_record_filter
from .models import RecordType, ResultFragment, SampleIdentity, VariantKey
from .pipeline import ReportPipeline, ReportRunSummary, build_formatter
from .profiles import ReportProfile, ReportProfileLoader
from .vcf_header import VcfHeaderFixer

__all__ = [
    "__version__",
    "CnvThresholds",
    "ConfigurationError",
    "FilterCriteria",
    "OutputFormat",
    "ThresholdMode",
    "build_filter_criteria",
    "parse_gene_list",
    "ExternalToolError",
    "ToolRequirementError",
    "VcfExtractorTool",
    "MAX_WORKERS",
    "DispatchReport",
    "ParallelDispatcher",
    "RecordExtractor",
    "CnvExtractor",
    "FusionExtractor",
    "SnvIndelExtractor",
    "FilterEngine",
    "build_record_filter",
    "RecordType",
    "ResultFragment",
    "SampleIdentity",
    "VariantKey",
    "ReportPipeline",
    "ReportRunSummary",
    "build_formatter",
    "ReportProfile",
    "ReportProfileLoader",
    "VcfHeaderFixer",
]
