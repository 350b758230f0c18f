"""Linter for slash command definition files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from cclint.linters.base import (
    FrontmatterLinter,
    LintOptions,
    LintResult,
    is_known_tool,
    split_tools,
    tool_base_name,
    validate_tool_pattern,
)

COMMAND_DIRS: tuple[str, ...] = (".claude/commands", "src/commands", "commands")

_BASH_EXEC_RE = re.compile(r"!\s*`[^`]+`")
_FILE_REF_RE = re.compile(r"@\S+\.(?:js|ts|jsx|tsx|py|md|json|yml|yaml|toml)\b")


class CommandsLinter(FrontmatterLinter):
    """Validates command front matter and how the command body uses tools."""

    name = "commands"
    description = "Lint Claude Code slash command files"
    kind = "command"
    search_dirs = COMMAND_DIRS

    def check(
        self,
        result: LintResult,
        data: dict[str, Any],
        body: str,
        path: Path,
        options: LintOptions,
    ) -> None:
        allowed = data.get("allowed-tools")
        if allowed:
            self._check_allowed_tools(allowed, result)
        allowed_text = allowed if isinstance(allowed, str) else ""

        if _BASH_EXEC_RE.search(body) and "Bash" not in allowed_text:
            result.add_warning(
                "File uses bash command execution (!`command`) but allowed-tools does not "
                "include Bash"
            )

        if _FILE_REF_RE.search(body) and "Read" not in allowed_text:
            result.add_suggestion(
                "File uses @file references but allowed-tools does not include Read"
            )

        stripped = body.strip()
        if not data.get("description") and stripped:
            first_line = stripped.split("\n", 1)[0].strip()
            if first_line and not first_line.startswith("#"):
                result.add_suggestion(
                    f'Consider adding description field (could use: "{first_line[:50]}...")'
                )

        if "$ARGUMENTS" in body and not data.get("argument-hint"):
            result.add_suggestion("Command uses $ARGUMENTS but no argument-hint is provided")

    def _check_allowed_tools(self, value: Any, result: LintResult) -> None:
        if not isinstance(value, str):
            result.add_error("allowed-tools must be a string")
            return

        for tool in split_tools(value):
            if not is_known_tool(tool):
                result.add_warning(f"Unknown tool: {tool_base_name(tool)}")
            for message in validate_tool_pattern(tool):
                result.add_warning(message)
