"""Linter for the project documentation file (CLAUDE.md / AGENTS.md)."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from cclint.linters.base import BaseLinter, LintOptions, LintResult, run_custom_validation
from cclint.linters.discovery import existing_file
from cclint.linters.markdown_parser import MarkdownParser
from cclint.schemas import RECOMMENDED_CLAUDE_MD_SECTIONS, REQUIRED_CLAUDE_MD_SECTIONS

if TYPE_CHECKING:
    from cclint.config import CclintConfig
    from cclint.project import ProjectInfo

logger = logging.getLogger(__name__)

DOC_FILES: tuple[str, ...] = ("CLAUDE.md", "AGENTS.md")

MIN_DOC_LENGTH = 500
MAX_DOC_LENGTH = 40_000

_GUIDANCE_PATTERNS = (
    re.compile(r"codebase-map", re.IGNORECASE),
    re.compile(r"subagent", re.IGNORECASE),
    re.compile(r"build|compile", re.IGNORECASE),
    re.compile(r"test", re.IGNORECASE),
    re.compile(r"commit|git", re.IGNORECASE),
)

_TOOL_USAGE_PATTERNS = (
    re.compile(r"allowed-tools", re.IGNORECASE),
    re.compile(r"Task tool", re.IGNORECASE),
    re.compile(r"Bash tool", re.IGNORECASE),
    re.compile(r"Read tool", re.IGNORECASE),
    re.compile(r"Write tool", re.IGNORECASE),
)

_TEMPLATE_PATTERNS = (
    re.compile(r"This file provides guidance to AI", re.IGNORECASE),
    re.compile(r"When to Use", re.IGNORECASE),
    re.compile(r"Examples", re.IGNORECASE),
    re.compile(r"Security", re.IGNORECASE),
)


class ClaudeMdLinter(BaseLinter):
    """Checks structure and content of the top-level documentation file."""

    name = "claude-md"
    description = "Lint CLAUDE.md file structure and content"

    def lint(
        self,
        project_root: Path,
        options: LintOptions | None = None,
        project_info: ProjectInfo | None = None,
    ) -> list[LintResult]:
        options = options or LintOptions()
        config = self.config_of(project_info)

        files: list[Path] = []
        for name in DOC_FILES:
            path = existing_file(
                project_root / name, project_root, follow_symlinks=options.follow_symlinks
            )
            if path is not None:
                files.append(path)
        if not files:
            if not options.verbose:
                return []
            result = LintResult(file=str(project_root / "CLAUDE.md"))
            result.add_suggestion(
                "No CLAUDE.md or AGENTS.md found - consider creating one to document "
                "the project for AI assistants"
            )
            return [result]

        return self.lint_paths(files, options, config)

    def lint_paths(
        self,
        files: list[Path],
        options: LintOptions | None = None,
        config: CclintConfig | None = None,
    ) -> list[LintResult]:
        """Lint an explicit list of documentation files."""
        return [self.lint_file(path, config) for path in files]

    def lint_file(self, path: Path, config: CclintConfig | None = None) -> LintResult:
        """Lint a single documentation file."""
        result = LintResult(file=str(path))
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Failed to read file: {e}")
            return result

        sections = [s.heading.lower() for s in MarkdownParser.extract_all_sections(content)]

        self._check_structure(content, sections, result, config)
        self._check_content(content, result)
        self._check_template(content, result)

        hook = config.claude_md_rules.custom_validation if config else None
        run_custom_validation(result, hook, content, sections, linter_name=self.name)
        return result

    def _check_structure(
        self,
        content: str,
        sections: list[str],
        result: LintResult,
        config: CclintConfig | None,
    ) -> None:
        if MarkdownParser.extract_title(content) is None:
            result.add_error("Missing main title (# heading)")

        if not MarkdownParser.preamble(content):
            result.add_warning("Missing project description before first heading")

        rules = config.claude_md_rules if config else None
        required = REQUIRED_CLAUDE_MD_SECTIONS
        if rules is not None and rules.required_sections is not None:
            required = tuple(rules.required_sections)
        for section in required:
            if not any(section.lower() in heading for heading in sections):
                result.add_warning(f"Missing recommended section: {section}")

        recommended = RECOMMENDED_CLAUDE_MD_SECTIONS
        if rules is not None and rules.recommended_sections is not None:
            recommended = tuple(rules.recommended_sections)
        if recommended and not any(
            section.lower() in heading for section in recommended for heading in sections
        ):
            result.add_suggestion(
                'Consider adding recommended sections like "Git Commit Conventions" or "Architecture"'
            )

    def _check_content(self, content: str, result: LintResult) -> None:
        if len(content) < MIN_DOC_LENGTH:
            result.add_warning(
                "Document is quite short - consider adding more guidance for AI assistants"
            )
        elif len(content) > MAX_DOC_LENGTH:
            result.add_warning(
                f"Document is very long ({len(content)} characters) - consider splitting "
                "detailed guidance into separate files and linking to them"
            )

        if sum(1 for p in _GUIDANCE_PATTERNS if p.search(content)) < 3:
            result.add_suggestion(
                "Consider adding more project-specific guidance (build process, testing, "
                "git workflow, etc.)"
            )

        code_blocks = MarkdownParser.extract_code_blocks(content)
        if not code_blocks:
            result.add_suggestion("Consider adding code examples to illustrate usage patterns")
        elif len(code_blocks) < 3:
            result.add_suggestion("Consider adding more code examples for better clarity")

        if not any(p.search(content) for p in _TOOL_USAGE_PATTERNS):
            result.add_suggestion(
                "Consider documenting tool usage patterns and restrictions for AI assistants"
            )

    def _check_template(self, content: str, result: LintResult) -> None:
        if sum(1 for p in _TEMPLATE_PATTERNS if p.search(content)) < 2:
            result.add_suggestion(
                "Consider following AGENTS.md template structure more closely for better "
                "AI assistant guidance"
            )
        if "MANDATORY REQUIREMENT" not in content and "⚠️" not in content:
            result.add_suggestion(
                "Consider adding clear mandatory requirements and warnings for AI assistants"
            )
        if "delegate" not in content and "subagent" not in content:
            result.add_suggestion(
                "Consider documenting subagent delegation patterns for specialized tasks"
            )
