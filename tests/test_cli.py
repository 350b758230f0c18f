"""Tests for cclint CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from cclint import __version__
from cclint.cli import app

runner = CliRunner()

WARNING_AGENT = """---
name: helper
description: Helps with chores
tools: Read
model: sonnet
color: green
priority: 1
---

Help out.
"""


def test_version() -> None:
    """Test --version flag shows version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"cclint version {__version__}" in result.stdout


def test_help() -> None:
    """Test --help flag shows help."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Lint Claude Code project files" in result.stdout
    assert "lint" in result.stdout
    assert "info" in result.stdout


# -----------------------------------------------------------------------------
# Lint Command Tests
# -----------------------------------------------------------------------------


class TestLintCommand:
    """Tests for the lint command."""

    def test_valid_project(self, project: Path) -> None:
        """Test a clean project exits 0."""
        result = runner.invoke(app, ["lint"])
        assert result.exit_code == 0
        assert "Claude Code Lint Report" in result.stdout
        assert "All files are valid!" in result.stdout

    def test_errors_exit_1(self, project: Path) -> None:
        """Test errors make the command fail."""
        (project / ".claude" / "agents" / "broken.md").write_text("---\nname: broken\n---\n")
        result = runner.invoke(app, ["lint"])
        assert result.exit_code == 1
        assert "Missing required field: description" in result.stdout

    def test_json_format(self, project: Path) -> None:
        """Test --format json prints a parseable summary."""
        result = runner.invoke(app, ["lint", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["totalFiles"] == 3
        assert data["totalErrors"] == 0
        assert len(data["results"]) == 3

    def test_markdown_output_file(self, project: Path) -> None:
        """Test -o writes the report instead of printing it."""
        result = runner.invoke(app, ["lint", "-f", "markdown", "-o", "reports/lint.md"])
        assert result.exit_code == 0
        report = (project / "reports" / "lint.md").read_text(encoding="utf-8")
        assert report.startswith("# Claude Code Lint Report")
        assert "# Claude Code Lint Report" not in result.stdout

    def test_console_output_file(self, project: Path) -> None:
        """Test the console report can be recorded to a file."""
        result = runner.invoke(app, ["lint", "-o", "lint.txt"])
        assert result.exit_code == 0
        assert "All files are valid!" in (project / "lint.txt").read_text(encoding="utf-8")
        assert "All files are valid!" not in result.stdout

    def test_fail_on_warning(self, project: Path) -> None:
        """Test --fail-on lowers the failure threshold."""
        (project / ".claude" / "agents" / "helper.md").write_text(WARNING_AGENT)
        assert runner.invoke(app, ["lint"]).exit_code == 0
        result = runner.invoke(app, ["lint", "--fail-on", "warning"])
        assert result.exit_code == 1
        assert "Unrecognized field: priority" in result.stdout

    def test_quiet(self, project: Path) -> None:
        """Test -q drops the report banner."""
        result = runner.invoke(app, ["lint", "-q"])
        assert result.exit_code == 0
        assert "Claude Code Lint Report" not in result.stdout

    def test_exclude(self, project: Path) -> None:
        """Test --exclude removes files from the report."""
        (project / ".claude" / "agents" / "broken.md").write_text("---\nname: broken\n---\n")
        result = runner.invoke(app, ["lint", "--exclude", "broken.md", "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["totalFiles"] == 3

    def test_no_files_warning(self, project: Path) -> None:
        """Test an empty project lints cleanly but warns that nothing was found."""
        (project / "empty").mkdir()
        result = runner.invoke(app, ["lint", "--root", "empty"])
        assert result.exit_code == 0
        assert "Warning: No Claude Code files found" in result.output

        quiet = runner.invoke(app, ["lint", "--root", "empty", "-q"])
        assert "No Claude Code files found" not in quiet.output

    def test_output_file_confirmation(self, project: Path) -> None:
        """Test writing a report confirms the destination."""
        result = runner.invoke(app, ["lint", "-f", "json", "-o", "lint.json"])
        assert result.exit_code == 0
        assert "Success: Report written to lint.json" in result.output

    def test_no_allow_scripts(self, project: Path) -> None:
        """Test --no-allow-scripts ignores a Python configuration file."""
        (project / ".claude" / "agents" / "helper.md").write_text(WARNING_AGENT)
        (project / "cclint.config.py").write_text("config = {'rules': {'unknownFields': 'error'}}\n")
        assert runner.invoke(app, ["lint"]).exit_code == 1
        assert runner.invoke(app, ["lint", "--no-allow-scripts"]).exit_code == 0

    def test_invalid_format(self, project: Path) -> None:
        """Test an unknown format is a user error."""
        result = runner.invoke(app, ["lint", "--format", "xml"])
        assert result.exit_code == 1
        assert "Invalid format 'xml'" in result.output

    def test_invalid_fail_on(self, project: Path) -> None:
        """Test an unknown threshold is a user error."""
        result = runner.invoke(app, ["lint", "--fail-on", "info"])
        assert result.exit_code == 1
        assert "Invalid --fail-on 'info'" in result.output

    def test_root_outside_cwd(self, project: Path) -> None:
        """Test --root cannot leave the working directory."""
        result = runner.invoke(app, ["lint", "--root", "../other"])
        assert result.exit_code == 1
        assert "Path traversal attempt detected" in result.output

    def test_missing_root(self, project: Path) -> None:
        """Test a root that does not exist is a user error."""
        result = runner.invoke(app, ["lint", "--root", "nope"])
        assert result.exit_code == 1
        assert "Path does not exist" in result.output

    def test_concurrency_must_be_positive(self, project: Path) -> None:
        """Test --concurrency below 1 is rejected by option parsing."""
        result = runner.invoke(app, ["lint", "--concurrency", "0"])
        assert result.exit_code == 2


# -----------------------------------------------------------------------------
# Info Command Tests
# -----------------------------------------------------------------------------


class TestInfoCommand:
    """Tests for the info command."""

    def test_info(self, project: Path) -> None:
        """Test project details are shown in a table."""
        (project / "package.json").write_text(json.dumps({"name": "demo-app"}))
        (project / "pnpm-lock.yaml").write_text("")
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "Project Information" in result.stdout
        assert "demo-app" in result.stdout
        assert "pnpm" in result.stdout

    def test_info_with_config(self, project: Path) -> None:
        """Test the loaded config file is shown."""
        (project / ".cclintrc.json").write_text("{}")
        result = runner.invoke(app, ["info", "--root", "."])
        assert result.exit_code == 0
        assert ".cclintrc.json" in result.stdout

    def test_info_no_allow_scripts(self, project: Path) -> None:
        """Test --no-allow-scripts hides a Python configuration file."""
        (project / "cclint.config.py").write_text("config = {}\n")
        assert "cclint.config.py" in runner.invoke(app, ["info"]).stdout
        result = runner.invoke(app, ["info", "--no-allow-scripts"])
        assert result.exit_code == 0
        assert "cclint.config.py" not in result.stdout

    def test_info_unsafe_root(self, project: Path) -> None:
        """Test info shares the path gate."""
        result = runner.invoke(app, ["info", "--root", ".."])
        assert result.exit_code == 1
        assert "Error:" in result.output
