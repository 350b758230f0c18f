"""Object-oriented facade over the core linting functions.

Example:
    >>> from cclint import CClint
    >>> linter = CClint()
    >>> summary = linter.lint_project(".", follow_symlinks=True)
    >>> summary.total_errors
    0
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Sequence
from typing import Any

from cclint import core
from cclint.config import CclintConfig
from cclint.linters import LintOptions, LintResult
from cclint.project import ProjectInfo
from cclint.summary import LintSummary


class CClint:
    """Lints Claude Code projects with an optional fixed configuration.

    Every method accepts a LintOptions instance and/or individual option
    keywords (``parallel=False``, ``follow_symlinks=True``, ...); keywords win.

    Args:
        config: Configuration used instead of each project's own config file.
    """

    def __init__(self, config: CclintConfig | None = None) -> None:
        self.config = config

    @staticmethod
    def normalize_options(options: LintOptions | None = None, **overrides: Any) -> LintOptions:
        """Merge option keywords over options (or the defaults).

        Raises:
            TypeError: If a keyword is not a LintOptions field.
        """
        return dataclasses.replace(options or LintOptions(), **overrides)

    def lint_project(
        self,
        project_root: str | os.PathLike[str] = ".",
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> LintSummary:
        return core.run_lint(
            project_root, self.normalize_options(options, **overrides), self.config
        )

    def lint_files(
        self,
        files: Sequence[str | os.PathLike[str]],
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> LintSummary:
        return core.lint_files(files, self.normalize_options(options, **overrides), self.config)

    def lint_agents(
        self,
        project_root: str | os.PathLike[str] | None = None,
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> list[LintResult]:
        return core.lint_agents(
            project_root, self.normalize_options(options, **overrides), self.config
        )

    def lint_commands(
        self,
        project_root: str | os.PathLike[str] | None = None,
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> list[LintResult]:
        return core.lint_commands(
            project_root, self.normalize_options(options, **overrides), self.config
        )

    def lint_settings(
        self,
        project_root: str | os.PathLike[str] | None = None,
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> list[LintResult]:
        return core.lint_settings(
            project_root, self.normalize_options(options, **overrides), self.config
        )

    def lint_docs(
        self,
        project_root: str | os.PathLike[str] | None = None,
        options: LintOptions | None = None,
        **overrides: Any,
    ) -> list[LintResult]:
        return core.lint_docs(
            project_root, self.normalize_options(options, **overrides), self.config
        )

    def load_config(self, project_root: str | os.PathLike[str] | None = None) -> CclintConfig | None:
        return core.load_project_config(project_root)

    def detect_project(self, project_root: str | os.PathLike[str] | None = None) -> ProjectInfo:
        return core.detect_project(project_root)
