import io
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from cfdna_report import (  # noqa: E402
    CnvExtractor,
    CnvThresholds,
    FusionExtractor,
    OutputFormat,
    ParallelDispatcher,
    RecordType,
    ReportPipeline,
    build_filter_criteria,
    build_formatter,
)


def _write_cnv_vcf(path: Path) -> Path:
    path.write_text(
        "##fileformat=VCFv4.1\n"
        "##AssumedGender=f\n"
        "##mapd=0.123\n"
        "##CellularityAsAFractionBetween0-1=0.45\n"
        "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tSampleA\n"
        "chr8\t1000\tMYC\tG\t<CNV>\t100\tPASS\tEND=2000;LEN=1000;NUMTILES=12;FD=2.6;PVAL=1e-06;RMMDP=500;MMDP=400"
        "\tGT:GQ:CN\t./.:0:5.0\n"
        "chr17\t3000\tERBB2\tC\t<CNV>\t100\tPASS\tEND=4000;LEN=1000;NUMTILES=8;FD=1.0;PVAL=1e-06;RMMDP=500;MMDP=400"
        "\tGT:GQ:CN\t./.:0:2.0\n"
        "chr10\t500\tPTEN\tA\t<CNV>\t100\tPASS\tEND=900;LEN=400;NUMTILES=6;FD=0.4;PVAL=0.01;RMMDP=500;MMDP=400"
        "\tGT:GQ:CN\t./.:0:0.5\n"
    )
    return path


def test_cnv_pipeline_reports_copy_number_outliers(tmp_path: Path) -> None:
    vcf = _write_cnv_vcf(tmp_path / "SampleA.vcf")
    criteria = build_filter_criteria(thresholds=CnvThresholds(copy_amp=4, copy_loss=1))
    pipeline = ReportPipeline(
        extractor=CnvExtractor(),
        criteria=criteria,
        formatter=build_formatter(RecordType.CNV, output_format=OutputFormat.CSV),
        dispatcher=ParallelDispatcher(max_workers=1),
    )
    stream = io.StringIO()

    summary = pipeline.run([vcf], stream)

    lines = stream.getvalue().splitlines()
    assert lines[0] == "::: CNV Data For SampleA (Gender: Female, Cellularity: 0.45, MAPD: 0.123) :::"
    assert lines[2] == "chr8,MYC,1000,2000,1000,12,5.0,2.6,1e-06,500,400"
    assert len([line for line in lines if line.startswith("chr")]) == 1
    assert summary.input_files == 1
    assert summary.samples == 1
    assert summary.reported_rows == 1
    assert summary.rejections == {"threshold": 1, "pvalue": 1}


def test_pipeline_reports_failed_inputs_and_continues(tmp_path: Path, caplog) -> None:
    vcf = _write_cnv_vcf(tmp_path / "SampleA.vcf")
    pipeline = ReportPipeline(
        extractor=CnvExtractor(),
        criteria=build_filter_criteria(),
        formatter=build_formatter(RecordType.CNV, raw=True),
        dispatcher=ParallelDispatcher(max_workers=2),
    )
    stream = io.StringIO()

    with caplog.at_level(logging.ERROR, logger="cfdna_report.dispatch"):
        summary = pipeline.run([tmp_path / "absent.vcf", vcf], stream)

    assert summary.samples == 1
    assert len(summary.failures) == 1
    assert "absent.vcf" in caplog.text
    lines = stream.getvalue().splitlines()
    assert lines[0].startswith("Sample,Gender,MAPD,Cellularity,Chr,Gene")
    assert len(lines) == 3


def test_fusion_pipeline_logs_controls_at_debug(tmp_path: Path, caplog) -> None:
    vcf = tmp_path / "Case_RNA.vcf"
    vcf.write_text(
        "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tCase_RNA\n"
        "chr2\t100\tEML4-ALK.E13A20.COSF408\tA\t<F>\t.\tPASS\tSVTYPE=Fusion;MOL_COUNT=40\tGT\t./.\n"
        "chr11\t200\tTBP\tA\t<P>\t.\tPASS\tSVTYPE=ProcControl;GENE_NAME=TBP;MOL_COUNT=55\tGT\t./.\n"
    )
    logger = logging.getLogger("cfdna_report.test_fusion")
    pipeline = ReportPipeline(
        extractor=FusionExtractor(),
        criteria=build_filter_criteria(read_threshold=2, include_nocall=False),
        formatter=build_formatter(RecordType.FUSION),
        dispatcher=ParallelDispatcher(max_workers=1),
        logger=logger,
    )
    stream = io.StringIO()

    with caplog.at_level(logging.DEBUG, logger="cfdna_report.test_fusion"):
        summary = pipeline.run([vcf], stream)

    assert summary.reported_rows == 1
    assert "Case controls: {'TBP': '55'}" in caplog.text
    assert "Filters being employed" in caplog.text
    lines = stream.getvalue().splitlines()
    assert lines[0] == "::: Fusions in Case :::"
    assert lines[2].split() == ["EML4-ALK.E13A20", "COSF408", "40", "ALK", "EML4"]
