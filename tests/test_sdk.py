"""Tests for the CClint facade."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cclint import CClint, LintOptions
from cclint.config import CclintConfig, LintRules

HELPER_AGENT = "---\nname: helper\ndescription: Helps\npriority: 1\n---\n\nHelp.\n"


class TestNormalizeOptions:
    """Tests for CClint.normalize_options()."""

    def test_defaults(self) -> None:
        """Test no arguments gives the default options."""
        assert CClint.normalize_options() == LintOptions()

    def test_keywords_override(self) -> None:
        """Test keywords win over the given options."""
        base = LintOptions(parallel=True, verbose=True)
        merged = CClint.normalize_options(base, parallel=False)
        assert merged.parallel is False
        assert merged.verbose is True
        assert base.parallel is True

    def test_unknown_keyword(self) -> None:
        """Test unknown option names are rejected."""
        with pytest.raises(TypeError):
            CClint.normalize_options(colour=True)


class TestCClint:
    """Tests for the CClint methods."""

    def test_lint_project(self, project: Path) -> None:
        """Test a full lint through the facade."""
        summary = CClint().lint_project()
        assert summary.total_files == 3
        assert summary.total_errors == 0

    def test_lint_project_with_keywords(self, project: Path) -> None:
        """Test option keywords reach the linters."""
        summary = CClint().lint_project(".", verbose=True, parallel=False)
        assert summary.total_files == 4

    def test_fixed_config(self, project: Path) -> None:
        """Test the facade config replaces the project config."""
        (project / ".claude" / "agents" / "helper.md").write_text(HELPER_AGENT)
        (project / ".cclintrc.json").write_text(json.dumps({"rules": {"unknownFields": "ignore"}}))
        strict = CClint(CclintConfig(rules=LintRules(unknown_fields="error")))
        assert strict.lint_project().total_errors == 1
        assert CClint().lint_project().total_errors == 0

    def test_single_kinds(self, project: Path) -> None:
        """Test the per-kind methods."""
        linter = CClint()
        assert len(linter.lint_agents(".")) == 1
        assert len(linter.lint_commands(".")) == 1
        assert len(linter.lint_settings(".")) == 1
        assert linter.lint_docs(".") == []
        assert len(linter.lint_docs(".", verbose=True)) == 1

    def test_lint_files(self, project: Path) -> None:
        """Test explicit files through the facade."""
        summary = CClint().lint_files([".claude/commands/test.md"], parallel=False)
        assert summary.total_files == 1

    def test_project_helpers(self, project: Path) -> None:
        """Test config loading and project detection."""
        linter = CClint()
        assert linter.load_config() is None
        assert linter.detect_project().root == project.resolve()
