"""End-to-end tests for HashMaker CLI.

This module tests the CLI interface using Typer's CliRunner, with engine
report JSON files and a scripted engine executable.
"""

import json
import shlex
import sys
import textwrap
import zipfile
from dataclasses import replace
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hashmaker import __version__
from hashmaker.cli import app
from hashmaker.models import HashReport

ENGINE_SCRIPT = textwrap.dedent(
    '''
    import json
    import sys

    path = sys.argv[-1]
    print(json.dumps({"event": "hash-progress",
                      "payload": {"status": "Computing hash...", "processed": 1, "total": 1}}))
    print(json.dumps({"event": "report", "payload": {
        "hash": "5D41402ABC4B2A76",
        "timeTaken": "00:00:00",
        "folderCount": 1,
        "fileCount": 1,
        "path": path,
        "fileHashes": [
            {"path": "\\\\cli\\\\", "hash": ""},
            {"path": "\\\\cli\\\\hello.txt", "hash": "AAAA"},
            {"path": "\\\\cli\\\\", "hash": "BBBB"},
        ],
    }}))
    '''
)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CliRunner instance for testing."""
    return CliRunner()


@pytest.fixture
def mismatch_json(temp_dir: Path, sample_report: HashReport) -> Path:
    """Write a report whose final hash differs from sample_report's."""
    path = temp_dir / "mismatch.json"
    path.write_text(json.dumps(replace(sample_report, hash="0" * 16).to_dict()), encoding="utf-8")
    return path


@pytest.fixture
def engine_command(temp_dir: Path) -> str:
    """Command line of a scripted engine executable."""
    script = temp_dir / "engine.py"
    script.write_text(ENGINE_SCRIPT, encoding="utf-8")
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"


class TestGlobalOptions:
    """Test version and help output."""

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"HashMaker v{__version__}" in result.output

    def test_command_help(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["render", "--help"])
        assert result.exit_code == 0
        assert "--report-no" in result.output


class TestCompareCommand:
    """Test the compare command."""

    def test_identical(self, cli_runner: CliRunner, report_json: Path):
        result = cli_runner.invoke(app, ["compare", str(report_json), str(report_json)])
        assert result.exit_code == 0
        assert "The hashes are identical." in result.output

    def test_mismatch(self, cli_runner: CliRunner, report_json: Path, mismatch_json: Path):
        result = cli_runner.invoke(app, ["compare", str(report_json), str(mismatch_json)])
        assert result.exit_code == 1
        assert "The hashes do not match." in result.output

    def test_invalid_report(self, cli_runner: CliRunner, temp_dir: Path, report_json: Path):
        broken = temp_dir / "broken.json"
        broken.write_text("[]", encoding="utf-8")
        result = cli_runner.invoke(app, ["compare", str(report_json), str(broken)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_report(self, cli_runner: CliRunner, temp_dir: Path, report_json: Path):
        result = cli_runner.invoke(app, ["compare", str(report_json), str(temp_dir / "absent.json")])
        assert result.exit_code == 1
        assert "Cannot read report" in result.output


class TestRenderCommand:
    """Test the render command."""

    def test_writes_archive(self, cli_runner: CliRunner, temp_dir: Path, report_json: Path):
        out_dir = temp_dir / "out"
        out_dir.mkdir()
        result = cli_runner.invoke(
            app,
            [
                "render",
                str(report_json),
                "--report-no",
                "TR-9",
                "--product",
                "Widget",
                "--algorithm",
                "SHA512",
                "--test-date",
                "2026-01-02",
                "--output-dir",
                str(out_dir),
            ],
        )
        assert result.exit_code == 0, result.output
        archives = list(out_dir.glob("hash-results-*.zip"))
        assert len(archives) == 1
        with zipfile.ZipFile(archives[0]) as archive:
            names = archive.namelist()
            assert "TR-9_HashList.html" in names
            confirmation = archive.read("TR-9_HashReport.html").decode("utf-8")
        assert "Hash Algorithm : SHA-512" in confirmation
        assert "January 2, 2026" in confirmation
        assert "Widget" in confirmation

    def test_invalid_algorithm(self, cli_runner: CliRunner, report_json: Path):
        result = cli_runner.invoke(app, ["render", str(report_json), "--algorithm", "crc32"])
        assert result.exit_code == 2

    def test_invalid_test_date(self, cli_runner: CliRunner, report_json: Path):
        result = cli_runner.invoke(app, ["render", str(report_json), "--test-date", "19/10/2026"])
        assert result.exit_code == 2

    def test_missing_output_dir(self, cli_runner: CliRunner, temp_dir: Path, report_json: Path):
        result = cli_runner.invoke(
            app, ["render", str(report_json), "--output-dir", str(temp_dir / "missing")]
        )
        assert result.exit_code == 1
        assert "Output directory does not exist" in result.output


class TestTreeCommand:
    """Test the tree command."""

    def test_shows_entries(self, cli_runner: CliRunner, report_json: Path):
        result = cli_runner.invoke(app, ["tree", str(report_json)])
        assert result.exit_code == 0
        assert "todo.txt" in result.output
        assert "9F86D081884C7D65" in result.output

    def test_limit(self, cli_runner: CliRunner, report_json: Path):
        result = cli_runner.invoke(app, ["tree", str(report_json), "--limit", "1"])
        assert result.exit_code == 0
        assert "more" in result.output


class TestRunCommand:
    """Test the interactive run command."""

    def test_requires_engine(self, cli_runner: CliRunner, monkeypatch):
        monkeypatch.delenv("HASHMAKER_ENGINE", raising=False)
        result = cli_runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "No hashing engine configured" in result.output

    def test_session_with_engine(self, cli_runner: CliRunner, temp_dir: Path, engine_command: str):
        log_file = temp_dir / "session.log"
        result = cli_runner.invoke(
            app,
            [
                "run",
                "--engine-command",
                engine_command,
                "--output-dir",
                str(temp_dir),
                "--log-file",
                str(log_file),
            ],
            input="s\n/data/cli\nd\nq\n",
        )
        assert result.exit_code == 0, result.output
        assert "5D41402ABC4B2A76" in result.output
        assert len(list(temp_dir.glob("hash-results-*.zip"))) == 1

        content = log_file.read_text()
        assert "Reports generated: 1" in content
        assert "Archives exported: 1" in content

    def test_engine_from_environment(self, cli_runner: CliRunner, temp_dir: Path, engine_command: str):
        result = cli_runner.invoke(
            app,
            ["run", "--output-dir", str(temp_dir)],
            input="q\n",
            env={"HASHMAKER_ENGINE": engine_command},
        )
        assert result.exit_code == 0, result.output
        assert "Session Summary" in result.output
