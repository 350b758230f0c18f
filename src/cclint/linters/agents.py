"""Linter for agent / subagent definition files."""

from __future__ import annotations

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

AGENT_DIRS: tuple[str, ...] = (".claude/agents", "src/agents", "agents")


def check_tools(value: Any, result: LintResult, field_name: str = "tools") -> None:
    """Check a tool list given as a comma separated string or a list.

    Shared by the agent and command linters.
    """
    if value is None or value == "" or value == []:
        result.add_warning(
            f"Empty {field_name} field - this will grant NO tools. Remove the field "
            "entirely to inherit all tools, or specify tools explicitly"
        )
        return

    if isinstance(value, str):
        if value.strip() == "*":
            return
        tools = split_tools(value)
    elif isinstance(value, list):
        if not all(isinstance(t, str) for t in value):
            result.add_error(f"{field_name} array must contain only strings")
            return
        tools = [t.strip() for t in value if t.strip()]
    else:
        result.add_error(f'{field_name} field must be a string, array, or "*"')
        return

    if not tools:
        result.add_warning(f"Empty {field_name} field detected - this will grant NO tools")
        return

    for tool in tools:
        if not is_known_tool(tool):
            result.add_warning(f"Unknown tool: {tool_base_name(tool)}")
        for message in validate_tool_pattern(tool):
            result.add_warning(message)


class AgentsLinter(FrontmatterLinter):
    """Validates agent front matter and agent-specific conventions."""

    name = "agents"
    description = "Lint Claude Code agent definition files"
    kind = "agent"
    search_dirs = AGENT_DIRS

    def check(
        self,
        result: LintResult,
        data: dict[str, Any],
        body: str,
        path: Path,
        options: LintOptions,
    ) -> None:
        if "tools" in data:
            check_tools(data["tools"], result, "tools")
        elif "allowed-tools" in data:
            check_tools(data["allowed-tools"], result, "allowed-tools")

        name = data.get("name")
        if isinstance(name, str) and name and name != path.stem:
            result.add_suggestion(f'name "{name}" doesn\'t match filename "{path.stem}"')

        description = data.get("description")
        if isinstance(description, str) and description and body.strip().startswith(description):
            result.add_suggestion("Description is duplicated in markdown content")
