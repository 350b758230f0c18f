"""Linter for the project settings file (.claude/settings.json)."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from cclint.linters.base import (
    BaseLinter,
    LintOptions,
    LintResult,
    apply_validation_errors,
    run_custom_validation,
    unknown_field_severity,
)
from cclint.linters.discovery import existing_file
from cclint.schemas import KNOWN_CLAUDE_TOOLS, VALID_HOOK_EVENTS

if TYPE_CHECKING:
    from cclint.config import CclintConfig
    from cclint.project import ProjectInfo

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(".claude") / "settings.json"

DEPRECATED_KEYS: tuple[str, ...] = ("legacyHooks", "oldHookFormat")

_MATCHER_SPLIT_RE = re.compile(r"[,|]")


class SettingsLinter(BaseLinter):
    """Validates settings.json structure and hook configuration."""

    name = "settings"
    description = "Lint .claude/settings.json configuration files"

    def lint(
        self,
        project_root: Path,
        options: LintOptions | None = None,
        project_info: ProjectInfo | None = None,
    ) -> list[LintResult]:
        options = options or LintOptions()
        config = self.config_of(project_info)
        candidate = project_root / SETTINGS_PATH

        path = existing_file(candidate, project_root, follow_symlinks=options.follow_symlinks)
        if path is None:
            if not options.verbose:
                return []
            result = LintResult(file=str(candidate))
            result.add_suggestion(
                "No .claude/settings.json found - consider creating one for "
                "project-specific configuration"
            )
            return [result]

        return self.lint_paths([path], options, config)

    def lint_paths(
        self,
        files: list[Path],
        options: LintOptions | None = None,
        config: CclintConfig | None = None,
    ) -> list[LintResult]:
        """Lint an explicit list of settings files."""
        options = options or LintOptions()
        schema = self.compile_schema("settings", config, options)
        return [self.lint_file(path, schema, config) for path in files]

    def lint_file(
        self, path: Path, schema: type[BaseModel], config: CclintConfig | None = None
    ) -> LintResult:
        """Lint a single settings file against schema."""
        result = LintResult(file=str(path))
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Failed to read file: {e}")
            return result

        try:
            settings = json.loads(content)
        except json.JSONDecodeError as e:
            result.add_error(f"Invalid JSON: {e}")
            return result

        if not isinstance(settings, dict):
            result.add_error("Settings file must contain a JSON object")
            return result

        try:
            schema.model_validate(settings)
        except ValidationError as e:
            apply_validation_errors(e, result, unknown_field_severity(config))

        hooks = settings.get("hooks")
        if isinstance(hooks, dict):
            self._check_hooks(hooks, result)
            if not hooks:
                result.add_suggestion(
                    "Empty hooks configuration - consider removing or adding hooks"
                )

        if settings.get("environmentVariables"):
            result.add_warning(
                "environmentVariables should typically be in user settings "
                "(~/.claude/settings.json), not project settings"
            )

        for key in DEPRECATED_KEYS:
            if settings.get(key):
                result.add_warning(f"Deprecated configuration key: {key}")

        hook = config.settings_schema.custom_validation if config else None
        run_custom_validation(result, hook, settings, linter_name=self.name)
        return result

    def _check_hooks(self, hooks: dict[str, Any], result: LintResult) -> None:
        for event, entries in hooks.items():
            if event not in VALID_HOOK_EVENTS:
                result.add_warning(f"Unknown hook event type: {event}")

            if not isinstance(entries, list):
                result.add_error(f"{event} must be an array of hook configurations")
                continue

            for i, entry in enumerate(entries):
                self._check_entry(entry, f"{event}[{i}]", result)

    def _check_entry(self, entry: Any, where: str, result: LintResult) -> None:
        if not isinstance(entry, dict):
            result.add_error(f"{where}: Hook entry must be an object")
            return

        matcher = entry.get("matcher")
        if not matcher:
            result.add_error(f"{where}: Missing required field 'matcher'")
        elif isinstance(matcher, str):
            self._check_matcher(matcher, where, result)

        actions = entry.get("hooks")
        if not isinstance(actions, list):
            result.add_error(f"{where}: Missing or invalid 'hooks' array")
            return

        for i, action in enumerate(actions):
            self._check_action(action, f"{where}.hooks[{i}]", result)

    def _check_matcher(self, matcher: str, where: str, result: LintResult) -> None:
        for tool in (t.strip() for t in _MATCHER_SPLIT_RE.split(matcher)):
            if not tool or "*" in tool or tool in KNOWN_CLAUDE_TOOLS:
                continue
            if tool.startswith("mcp__"):
                continue
            # anything with regex syntax is left to Claude Code
            if any(c in tool for c in ".([\\^$+?"):
                continue
            result.add_suggestion(f"{where}: Unknown tool in matcher: {tool}")

    def _check_action(self, action: Any, where: str, result: LintResult) -> None:
        if not isinstance(action, dict):
            result.add_error(f"{where}: Hook must be an object")
            return

        kind = action.get("type")
        if not kind:
            result.add_error(f"{where}: Missing required field 'type'")
        elif kind != "command":
            result.add_warning(f"{where}: Unknown hook type '{kind}', expected 'command'")

        command = action.get("command")
        if command is None:
            result.add_error(f"{where}: Missing required field 'command'")
        elif isinstance(command, str) and not command.strip():
            result.add_error(f"{where}: Command cannot be empty")
