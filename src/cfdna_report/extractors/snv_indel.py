"""SNV and indel extraction from ``vcfExtractor.pl`` output."""

from __future__ import annotations

from pathlib import Path

from cfdna_report.annotator import VcfExtractorTool
from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.extractors.common import (
    HeaderScanner,
    RecordSchema,
    SchemaField,
    compile_metadata,
    iter_lines,
)
from cfdna_report.models import RecordType, ResultFragment, SampleIdentity, VariantKey

SNV_INDEL_SCHEMA = RecordSchema(
    (
        SchemaField("position"),
        SchemaField("ref"),
        SchemaField("alt"),
        SchemaField("vaf", float),
        SchemaField("lod", float),
        SchemaField("amp_cov", int),
        SchemaField("mol_ref_cov", int),
        SchemaField("mol_alt_cov", int),
        SchemaField("varid"),
        SchemaField("gene"),
        SchemaField("transcript"),
        SchemaField("cds"),
        SchemaField("aa"),
        SchemaField("location"),
        SchemaField("function"),
        SchemaField("gene_class", required=False),
        SchemaField("variant_class", required=False),
    )
)

UNSET_VARID = "."

SNV_HEADER_PATTERNS = (
    compile_metadata("Timestamp", r"^##fileUTCtime=(.*?)$"),
)


def passes_secondary_filter(record: dict[str, str], min_alt_mol_cov: int = 1) -> bool:
    """cfDNA pipeline baseline: VAF above LOD, alt molecular coverage, known variant id."""

    vaf = SNV_INDEL_SCHEMA.typed(record, "vaf")
    lod = SNV_INDEL_SCHEMA.typed(record, "lod")
    alt_cov = SNV_INDEL_SCHEMA.typed(record, "mol_alt_cov")
    return vaf > lod and alt_cov > min_alt_mol_cov and record["varid"] != UNSET_VARID


class SnvIndelExtractor(RecordExtractor):
    """Run the external extractor for one VCF and keep records keyed by ``pos:ref:alt``."""

    record_type = RecordType.SNV_INDEL
    vocabulary = SNV_INDEL_SCHEMA.names

    def __init__(
        self,
        tool: VcfExtractorTool | None = None,
        *,
        genes: frozenset[str] = frozenset(),
        min_alt_mol_cov: int = 1,
    ) -> None:
        self.tool = tool or VcfExtractorTool()
        self.genes = genes
        self.min_alt_mol_cov = min_alt_mol_cov

    def extract(self, path: Path) -> ResultFragment:
        fragment = ResultFragment(
            source=Path(path),
            record_type=self.record_type,
            identity=self.identity(path),
        )

        for line in self.tool.iter_lines(path, self.genes):
            if not line.startswith("chr"):
                continue
            record = SNV_INDEL_SCHEMA.decode(line.split())
            if record is None:
                fragment.skipped_lines += 1
                continue
            if not passes_secondary_filter(record, self.min_alt_mol_cov):
                continue
            key = VariantKey(parts=(record["position"], record["ref"], record["alt"]))
            fragment.records[key] = self.complete(record)

        return fragment

    @staticmethod
    def identity(path: str | Path) -> SampleIdentity | None:
        scanner = HeaderScanner(SNV_HEADER_PATTERNS)
        for line in iter_lines(path):
            if line.strip() and not scanner.feed(line):
                break
        if not scanner.sample_name:
            return None
        return SampleIdentity(
            name=scanner.sample_name,
            metadata=(("Timestamp", scanner.get("Timestamp")),),
        )
