"""Per-sample filtering and projection of extracted records into report rows."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter

from cfdna_report.config import CnvThresholds, FilterCriteria, ThresholdMode
from cfdna_report.extractors.common import to_float
from cfdna_report.extractors.fusion import NOVEL_IDS
from cfdna_report.extractors.snv_indel import SNV_INDEL_SCHEMA
from cfdna_report.models import FieldSet, RecordType, ReportRow, ResultSet, SampleIdentity, VariantKey

NOCALL = "NOCALL"
FAIL = "FAIL"


def passes_threshold(mode: ThresholdMode, thresholds: CnvThresholds, *, cn: float, fd: float) -> bool:
    """Decide a CNV on the threshold pair selected at configuration time."""

    if mode is ThresholdMode.FOLD_DIFFERENCE:
        return fd > thresholds.fold_amp or fd < thresholds.fold_loss
    if mode is ThresholdMode.COPY_NUMBER:
        return cn > thresholds.copy_amp or cn < thresholds.copy_loss
    return True


class RecordFilter(ABC):
    """Accept/reject policy plus output projection for one record type."""

    record_type: RecordType

    def __init__(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria

    @abstractmethod
    def reject_reason(self, key: VariantKey, fields: FieldSet) -> str | None:
        """Return why a record is excluded, or None to keep it."""

    @abstractmethod
    def project(self, key: VariantKey, fields: FieldSet) -> ReportRow:
        """Copy the reportable fields into output order."""


class CnvFilter(RecordFilter):
    """Gene, NOCALL, tile-count, p-value and threshold policy for CNVs.

    The p-value gate rejects unconditionally before any threshold is looked at.
    """

    record_type = RecordType.CNV
    projected_fields = ("END", "LEN", "NUMTILES", "CN", "FD", "PVAL", "RMMDP", "MMDP")

    def reject_reason(self, key: VariantKey, fields: FieldSet) -> str | None:
        criteria = self.criteria
        if not criteria.allows_gene(key.parts[2]):
            return "gene"
        if not criteria.include_nocall and fields["FILTER"] == NOCALL:
            return "nocall"
        if criteria.min_tiles and to_float(fields["NUMTILES"]) < criteria.min_tiles:
            return "tiles"
        if to_float(fields["PVAL"]) > criteria.pvalue_cutoff:
            return "pvalue"
        if not passes_threshold(
            criteria.threshold_mode,
            criteria.thresholds,
            cn=to_float(fields["CN"]),
            fd=to_float(fields["FD"]),
        ):
            return "threshold"
        return None

    def project(self, key: VariantKey, fields: FieldSet) -> ReportRow:
        chrom, start, gene = key.parts[0], key.parts[1], key.parts[2]
        return (chrom, gene, start, *(fields[name] for name in self.projected_fields))


class FusionFilter(RecordFilter):
    """Reference-call, NOCALL, novel, driver-gene and read-count policy for fusions."""

    record_type = RecordType.FUSION

    def reject_reason(self, key: VariantKey, fields: FieldSet) -> str | None:
        criteria = self.criteria
        count = int(to_float(fields["COUNT"]))
        status = fields["FILTER"]

        if (count == 0 or status == FAIL) and not criteria.include_reference:
            return "reference"
        if status == NOCALL and not criteria.include_nocall:
            return "nocall"
        if key.parts[2] in NOVEL_IDS and not criteria.include_novel:
            return "novel"
        if not criteria.allows_gene(fields["DRIVER"]):
            return "gene"
        if count < criteria.read_threshold:
            return "read_count"
        return None

    def project(self, key: VariantKey, fields: FieldSet) -> ReportRow:
        pair, junction, fusion_id = key.parts
        return (f"{pair}.{junction}", fusion_id, fields["COUNT"], fields["DRIVER"], fields["PARTNER"])


class SnvIndelFilter(RecordFilter):
    """Gene and optional minimum-VAF policy for SNVs and indels."""

    record_type = RecordType.SNV_INDEL

    def reject_reason(self, key: VariantKey, fields: FieldSet) -> str | None:
        if not self.criteria.allows_gene(fields["gene"]):
            return "gene"
        min_vaf = self.criteria.min_vaf
        if min_vaf is not None and to_float(fields["vaf"]) < min_vaf:
            return "vaf"
        return None

    def project(self, key: VariantKey, fields: FieldSet) -> ReportRow:
        return tuple(fields[name] for name in SNV_INDEL_SCHEMA.names)


FILTERS: dict[RecordType, type[RecordFilter]] = {
    RecordType.CNV: CnvFilter,
    RecordType.FUSION: FusionFilter,
    RecordType.SNV_INDEL: SnvIndelFilter,
}


def build_record_filter(record_type: RecordType, criteria: FilterCriteria) -> RecordFilter:
    return FILTERS[record_type](criteria)


class FilterEngine:
    """Turn a ResultSet into ordered report rows per sample."""

    def __init__(self, record_filter: RecordFilter) -> None:
        self.record_filter = record_filter
        self.rejections: Counter[str] = Counter()

    def apply(self, result_set: ResultSet) -> dict[SampleIdentity, list[ReportRow]]:
        rows_by_sample: dict[SampleIdentity, list[ReportRow]] = {}

        for identity in sorted(result_set, key=lambda item: item.sort_key()):
            records = result_set[identity]
            rows: list[ReportRow] = []
            for key in sorted(records, key=lambda item: item.sort_key()):
                fields = records[key]
                reason = self.record_filter.reject_reason(key, fields)
                if reason is not None:
                    self.rejections[reason] += 1
                    continue
                rows.append(self.record_filter.project(key, fields))
            rows_by_sample[identity] = rows

        return rows_by_sample
