"""Linters for Claude Code project files.

Each linter discovers the files of one artifact kind, validates them and
returns one LintResult per examined file.
"""

from __future__ import annotations

from cclint.linters.agents import AgentsLinter
from cclint.linters.base import (
    BaseLinter,
    FrontmatterLinter,
    LintOptions,
    LintResult,
    has_frontmatter,
    validate_tool_pattern,
)
from cclint.linters.claude_md import ClaudeMdLinter
from cclint.linters.commands import CommandsLinter
from cclint.linters.discovery import discover, should_skip_file
from cclint.linters.runner import run_all
from cclint.linters.settings import SettingsLinter

# Run order of a full lint
LINTERS: dict[str, type[BaseLinter]] = {
    "agents": AgentsLinter,
    "commands": CommandsLinter,
    "settings": SettingsLinter,
    "claude-md": ClaudeMdLinter,
}

__all__ = [
    # Base types
    "BaseLinter",
    "FrontmatterLinter",
    "LintOptions",
    "LintResult",
    "has_frontmatter",
    "validate_tool_pattern",
    # Linters
    "AgentsLinter",
    "ClaudeMdLinter",
    "CommandsLinter",
    "SettingsLinter",
    "LINTERS",
    # Discovery and scheduling
    "discover",
    "run_all",
    "should_skip_file",
]
