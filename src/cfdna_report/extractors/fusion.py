"""Gene fusion extraction from cfDNA fusion pipeline VCFs."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from cfdna_report.extractors.base import RecordExtractor
from cfdna_report.extractors.common import first_group, is_column_header, is_meta_header, iter_lines
from cfdna_report.models import RecordType, ResultFragment, SampleIdentity, VariantKey

# Version 1, 2 and 3 panel drivers; retired entries stay for older VCFs.
DRIVER_GENES: frozenset[str] = frozenset(
    (
        "ABL1", "AKT2", "AKT3", "ALK", "AR", "AXL", "BRAF", "BRCA1", "BRCA2", "CDKN2A",
        "EGFR", "ERBB2", "ERBB4", "ERG", "ESR1", "ETV1", "ETV1a", "ETV1b", "ETV4", "ETV4a",
        "ETV5", "ETV5a", "ETV5d", "FGFR1", "FGFR2", "FGFR3", "FGR", "FLT3", "JAK2", "KRAS",
        "MDM4", "MET", "MYB", "MYBL1", "NF1", "NOTCH1", "NOTCH4", "NRG1", "NTRK1", "NTRK2",
        "NTRK3", "NUTM1", "PDGFRA", "PDGFRB", "PIK3CA", "PPARG", "PRKACA", "PRKACB", "PTEN",
        "RAD51B", "RAF1", "RB1", "RELA", "RET", "ROS1", "RSPO2", "RSPO3", "TERT",
    )
)

FUSION_FIELDS: tuple[str, ...] = ("COUNT", "DRIVER", "PARTNER", "FILTER")
UNKNOWN_DRIVER = "UNKNOWN"
NO_ID = "-"
NOVEL_IDS: frozenset[str] = frozenset({"Non-Targeted", "Novel"})

_FUSION_SVTYPE_RE = re.compile(r"SVTYPE=(Fusion|RNAExonVariant)")
_PROC_CONTROL_RE = re.compile(r"SVTYPE=ProcControl")
_MOL_COUNT_RE = re.compile(r"MOL_COUNT=(\d+)")
_GENE_NAME_RE = re.compile(r"GENE_NAME=([^;]*)")
_ID_SPLIT_RE = re.compile(r"[.|]")
_COPY_SUFFIX_RE = re.compile(r"_\d")
_SAMPLE_SUFFIX_RE = re.compile(r"(_Fusion_filtered)?\.vcf$", re.IGNORECASE)

_MIN_COLUMNS = 8


def resolve_driver(gene1: str, gene2: str, drivers: frozenset[str] = DRIVER_GENES) -> tuple[str, str]:
    """Return ``(driver, partner)`` for a fusion gene pair.

    Identical genes are both driver and partner. Otherwise the first gene found
    in ``drivers`` is the driver; when neither is a known driver the driver is
    ``UNKNOWN`` and the partner lists both genes.
    """

    if gene1 == gene2:
        return gene1, gene1
    if gene1 in drivers:
        return gene1, gene2
    if gene2 in drivers:
        return gene2, gene1
    return UNKNOWN_DRIVER, f"{gene1},{gene2}"


def canonical_gene_names(genes: Iterable[str], drivers: frozenset[str] = DRIVER_GENES) -> frozenset[str]:
    """Upper-case a gene list, keeping the listed spelling of mixed-case drivers such as ``ETV5d``."""

    spelling = {driver.upper(): driver for driver in drivers}
    return frozenset(spelling.get(gene.upper(), gene.upper()) for gene in genes)


def split_fusion_id(raw_id: str) -> tuple[str, str, str]:
    """Split ``PAIR.JUNCTION[.ID]`` into its parts, stripping ``_<n>`` copy suffixes."""

    parts = [_COPY_SUFFIX_RE.sub("", part, count=1) for part in _ID_SPLIT_RE.split(raw_id)]
    pair = parts[0]
    junction = parts[1] if len(parts) > 1 and parts[1] else NO_ID
    fusion_id = parts[2] if len(parts) > 2 and parts[2] else NO_ID
    return pair, junction, fusion_id


def sample_name_from_path(path: str | Path) -> str:
    name = _SAMPLE_SUFFIX_RE.sub("", Path(path).name)
    return name.replace("_RNA", "", 1)


class FusionExtractor(RecordExtractor):
    """Extract fusion calls keyed by ``pair|junction|id``; controls go to a side table."""

    record_type = RecordType.FUSION
    vocabulary = FUSION_FIELDS
    sentinels = {"COUNT": "0", "DRIVER": UNKNOWN_DRIVER, "PARTNER": ".", "FILTER": "."}

    def __init__(self, drivers: frozenset[str] = DRIVER_GENES) -> None:
        self.drivers = drivers

    def extract(self, path: Path) -> ResultFragment:
        fragment = ResultFragment(
            source=Path(path),
            record_type=self.record_type,
            identity=SampleIdentity(name=sample_name_from_path(path)),
        )

        for line in iter_lines(path):
            if not line.strip() or is_meta_header(line) or is_column_header(line):
                continue

            columns = line.split()
            if len(columns) < _MIN_COLUMNS:
                fragment.skipped_lines += 1
                continue

            raw_id, filter_value, info = columns[2], columns[6], columns[7]
            count = first_group(_MOL_COUNT_RE, info, "0")

            if _FUSION_SVTYPE_RE.search(info):
                if raw_id.endswith("WT"):
                    fragment.controls[raw_id] = count
                    continue

                pair, junction, fusion_id = split_fusion_id(raw_id)
                genes = pair.split("-")
                gene1 = genes[0]
                gene2 = genes[1] if len(genes) > 1 and genes[1] else gene1
                driver, partner = resolve_driver(gene1, gene2, self.drivers)

                key = VariantKey(parts=(pair, junction, fusion_id), separator="|")
                fragment.records[key] = self.complete(
                    {"COUNT": count, "DRIVER": driver, "PARTNER": partner, "FILTER": filter_value}
                )
            elif _PROC_CONTROL_RE.search(info):
                gene = first_group(_GENE_NAME_RE, info)
                if gene:
                    fragment.controls[gene] = count

        return fragment
