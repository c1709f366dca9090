import os
import stat
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from cfdna_report import (  # noqa: E402
    ConfigurationError,
    ExternalToolError,
    ToolRequirementError,
    VcfExtractorTool,
)
from cfdna_report.annotator import parse_tool_version  # noqa: E402
from cfdna_report.profiles import ExternalToolSpec  # noqa: E402


def _install_fake_tool(bin_dir: Path, version: str, body: str = "echo chr1:100 A G") -> Path:
    bin_dir.mkdir(parents=True, exist_ok=True)
    script = bin_dir / "vcfExtractor.pl"
    script.write_text(
        "#!/bin/sh\n"
        'if [ "$1" = "-v" ]; then\n'
        f'  echo "vcfExtractor.pl - {version}"\n'
        "  exit 0\n"
        "fi\n"
        f"{body}\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def fake_path(monkeypatch, tmp_path: Path) -> Path:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return bin_dir


def test_parse_tool_version_reads_major_minor() -> None:
    assert parse_tool_version("vcfExtractor.pl - v8.1.0_112017") == (8, 1)
    assert parse_tool_version("banner\nvcfExtractor.pl - v7.10.101617\n") == (7, 10)
    assert parse_tool_version("no version here") is None


def test_version_gate_accepts_new_enough_tool(fake_path: Path) -> None:
    _install_fake_tool(fake_path, "v8.1.0_112017")

    assert VcfExtractorTool().ensure_available() == (8, 1)


def test_version_gate_accepts_exact_minimum(fake_path: Path) -> None:
    _install_fake_tool(fake_path, "v7.9.0_010118")

    assert VcfExtractorTool().ensure_available() == (7, 9)


def test_version_gate_rejects_old_tool(fake_path: Path) -> None:
    _install_fake_tool(fake_path, "v7.2.0_010117")

    with pytest.raises(ToolRequirementError, match="too old"):
        VcfExtractorTool().ensure_available()


def test_missing_tool_is_a_configuration_error(fake_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("PATH", str(fake_path))

    with pytest.raises(ConfigurationError, match="not in your path"):
        VcfExtractorTool().ensure_available()


def test_command_includes_sorted_gene_filter() -> None:
    tool = VcfExtractorTool()

    assert tool.command("in.vcf") == ["vcfExtractor.pl", "-Nnac", "in.vcf"]
    assert tool.command("in.vcf", {"TP53", "EGFR"}) == [
        "vcfExtractor.pl",
        "-Nnac",
        "-g",
        "EGFR,TP53",
        "in.vcf",
    ]


def test_from_spec_uses_profile_values() -> None:
    tool = VcfExtractorTool.from_spec(ExternalToolSpec("extract.pl", (9, 0), ("-n",)))

    assert tool == VcfExtractorTool(executable="extract.pl", min_version=(9, 0), arguments=("-n",))


def test_iter_lines_streams_tool_output(fake_path: Path) -> None:
    _install_fake_tool(fake_path, "v8.1.0_112017")

    assert list(VcfExtractorTool().iter_lines("sample.vcf")) == ["chr1:100 A G"]


def test_iter_lines_raises_on_tool_failure(fake_path: Path) -> None:
    _install_fake_tool(fake_path, "v8.1.0_112017", body="echo 'cannot parse' >&2\nexit 3")

    with pytest.raises(ExternalToolError, match="exited with status 3"):
        list(VcfExtractorTool().iter_lines("sample.vcf"))
