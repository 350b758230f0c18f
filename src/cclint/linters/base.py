"""Base linter classes and result models.

Provides the result type every linter returns, the shared option set, and the
common per-file pipeline: front matter parsing, schema validation and custom
validation hooks.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Literal

import frontmatter
import yaml
from pydantic import BaseModel, ValidationError

from cclint.linters.discovery import discover
from cclint.linters.runner import run_all
from cclint.schemas import KNOWN_CLAUDE_TOOLS, MCP_TOOL_PREFIX, SchemaKind, get_schema

if TYPE_CHECKING:
    from cclint.config import CclintConfig
    from cclint.project import ProjectInfo

logger = logging.getLogger(__name__)

FailOn = Literal["error", "warning", "suggestion"]
FindingSeverity = Literal["error", "warning", "suggestion", "ignore"]

_TOOL_NAME_RE = re.compile(r"^([A-Za-z_][\w-]*)")


@dataclass
class LintResult:
    """Findings for a single examined file.

    Attributes:
        file: Absolute path of the file.
        valid: False as soon as any error is recorded.
        errors: Error messages, in the order they were found.
        warnings: Warning messages.
        suggestions: Suggestion messages.
        missing_fields: Required fields absent from the document.
        unused_fields: Fields the schema does not know about.
        custom_schema_errors: Messages returned by custom validation hooks,
            None when no hook reported anything.
    """

    file: str
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    unused_fields: list[str] = field(default_factory=list)
    custom_schema_errors: list[str] | None = None

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_suggestion(self, message: str) -> None:
        self.suggestions.append(message)

    def add_finding(self, severity: FindingSeverity, message: str) -> None:
        """Record a message at a configurable severity ("ignore" drops it)."""
        if severity == "error":
            self.add_error(message)
        elif severity == "warning":
            self.add_warning(message)
        elif severity == "suggestion":
            self.add_suggestion(message)

    def add_missing_field(self, name: str) -> None:
        if name not in self.missing_fields:
            self.missing_fields.append(name)

    def add_unused_field(self, name: str) -> None:
        if name not in self.unused_fields:
            self.unused_fields.append(name)

    def add_custom_schema_error(self, message: str) -> None:
        if self.custom_schema_errors is None:
            self.custom_schema_errors = []
        self.custom_schema_errors.append(message)
        self.add_error(f"Custom validation: {message}")

    @property
    def has_findings(self) -> bool:
        return bool(self.errors or self.warnings or self.suggestions)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for machine-readable reports."""
        data: dict[str, Any] = {
            "file": self.file,
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "missingFields": list(self.missing_fields),
            "unusedFields": list(self.unused_fields),
        }
        if self.custom_schema_errors is not None:
            data["customSchemaErrors"] = list(self.custom_schema_errors)
        return data


@dataclass
class LintOptions:
    """Options shared by every linter and the core entry points."""

    quiet: bool = False
    verbose: bool = False
    fail_on: FailOn = "error"
    custom_schemas: bool = True
    parallel: bool = True
    concurrency: int = 10
    follow_symlinks: bool = False
    allow_scripts: bool = True
    include_files: list[str] = field(default_factory=list)
    exclude_files: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Shared Helpers
# -----------------------------------------------------------------------------


def has_frontmatter(content: str) -> bool:
    """Check whether content starts with a front matter delimiter line."""
    first_line = content.split("\n", 1)[0]
    return first_line.rstrip("\r") == "---"


def validate_tool_pattern(tool: str) -> list[str]:
    """Check a tool specification such as ``Bash(git:*)``.

    Returns:
        Warning messages; empty if the pattern looks well formed.
    """
    if tool.count("(") != tool.count(")"):
        return [f"Unmatched parentheses in tool specification: {tool}"]
    return []


def tool_base_name(tool: str) -> str:
    """Return the tool name without any ``(...)`` argument pattern."""
    match = _TOOL_NAME_RE.match(tool.strip())
    return match.group(1) if match else tool.strip()


def is_known_tool(tool: str) -> bool:
    """Check a tool name against the built-in tools. MCP tools always pass."""
    name = tool.strip()
    if name == "*" or name.startswith(MCP_TOOL_PREFIX):
        return True
    return tool_base_name(name) in KNOWN_CLAUDE_TOOLS


def split_tools(value: str) -> list[str]:
    """Split a comma separated tool list, keeping commas inside parentheses."""
    tools: list[str] = []
    depth = 0
    current = ""
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char == "," and depth == 0:
            if current.strip():
                tools.append(current.strip())
            current = ""
            continue
        current += char
    if current.strip():
        tools.append(current.strip())
    return tools


def _field_path(loc: Sequence[int | str]) -> str:
    return ".".join(str(part) for part in loc)


def apply_validation_errors(
    error: ValidationError,
    result: LintResult,
    unknown_fields: FindingSeverity = "warning",
) -> None:
    """Translate pydantic validation errors into findings.

    Missing fields become errors plus missing_fields entries. Unknown fields
    become unused_fields entries reported at the unknown_fields severity.
    Everything else is an error prefixed with the field path.
    """
    for issue in error.errors():
        path = _field_path(issue["loc"])
        kind = issue["type"]
        if kind == "missing":
            result.add_missing_field(path)
            result.add_error(f"Missing required field: {path}")
        elif kind == "extra_forbidden":
            if unknown_fields == "ignore":
                continue
            result.add_unused_field(path)
            result.add_finding(unknown_fields, f"Unrecognized field: {path}")
        else:
            result.add_error(f"{path}: {issue['msg']}")


def run_custom_validation(
    result: LintResult,
    hook: Callable[..., Any] | None,
    *args: Any,
    linter_name: str = "",
) -> None:
    """Run a user supplied validation hook and record what it returns.

    Every returned message becomes a custom schema error. An exception raised
    by the hook becomes a single error on the result.
    """
    if hook is None:
        return
    try:
        messages = hook(*args) or []
        if isinstance(messages, str):
            messages = [messages]
        for message in messages:
            result.add_custom_schema_error(str(message))
    except Exception as e:
        logger.debug("Custom validation error in %s: %s", linter_name or "linter", e)
        result.add_error(f"Custom validation failed: {e}")


def unknown_field_severity(config: CclintConfig | None) -> FindingSeverity:
    return config.rules.unknown_fields if config is not None else "warning"


# -----------------------------------------------------------------------------
# Linter Base Classes
# -----------------------------------------------------------------------------


class BaseLinter(ABC):
    """Abstract base class for all linters.

    Attributes:
        name: Short identifier of the linter (e.g. "agents").
        description: One line describing what the linter checks.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @abstractmethod
    def lint(
        self,
        project_root: Path,
        options: LintOptions | None = None,
        project_info: ProjectInfo | None = None,
    ) -> list[LintResult]:
        """Lint every matching file of a project.

        Args:
            project_root: Validated, absolute project root.
            options: Lint options. Defaults to LintOptions().
            project_info: Detected project metadata, including the config.

        Returns:
            One result per examined file.
        """

    @staticmethod
    def config_of(project_info: ProjectInfo | None) -> CclintConfig | None:
        return project_info.cclint_config if project_info is not None else None

    def compile_schema(
        self, kind: SchemaKind, config: CclintConfig | None, options: LintOptions
    ) -> type[BaseModel]:
        """Compose the schema for kind, falling back to the base schema when the
        configured extension cannot be built."""
        try:
            return get_schema(kind, config, use_extensions=options.custom_schemas)
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring invalid %s schema configuration: %s", kind, e)
            return get_schema(kind, config, use_extensions=False)


class FrontmatterLinter(BaseLinter):
    """Base for linters of markdown files that start with YAML front matter.

    Subclasses set ``kind`` and ``search_dirs`` and implement ``check`` for
    their kind-specific heuristics.
    """

    kind: ClassVar[SchemaKind]
    search_dirs: ClassVar[tuple[str, ...]] = ()

    def lint(
        self,
        project_root: Path,
        options: LintOptions | None = None,
        project_info: ProjectInfo | None = None,
    ) -> list[LintResult]:
        options = options or LintOptions()
        config = self.config_of(project_info)
        files = discover(
            project_root,
            [project_root / d for d in self.search_dirs],
            config,
            follow_symlinks=options.follow_symlinks,
        )
        return self.lint_paths(files, options, config)

    def lint_paths(
        self,
        files: Sequence[Path],
        options: LintOptions | None = None,
        config: CclintConfig | None = None,
    ) -> list[LintResult]:
        """Lint an explicit list of files."""
        options = options or LintOptions()
        schema = self.compile_schema(self.kind, config, options)

        def processor(path: Path, cfg: CclintConfig | None) -> LintResult | None:
            return self.process_file(path, schema, cfg, options)

        return run_all(
            list(files),
            processor,
            config,
            parallel=options.parallel,
            concurrency=options.concurrency,
        )

    def process_file(
        self,
        path: Path,
        schema: type[BaseModel],
        config: CclintConfig | None,
        options: LintOptions,
    ) -> LintResult | None:
        """Run the full pipeline on one file.

        Returns:
            The result, or None when the file has no front matter.
        """
        result = LintResult(file=str(path))
        try:
            content = path.read_text(encoding="utf-8")
            if not has_frontmatter(content):
                return None

            try:
                post = frontmatter.loads(content)
            except (yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
                result.add_error(f"Failed to parse frontmatter: {e}")
                return result

            data: dict[str, Any] = dict(post.metadata)
            try:
                schema.model_validate(data)
            except ValidationError as e:
                apply_validation_errors(e, result, unknown_field_severity(config))

            self.check(result, data, post.content, path, options)

            hook = config.schema_for(self.kind).custom_validation if config else None
            run_custom_validation(result, hook, data, linter_name=self.name)
        except Exception as e:
            logger.debug("Failed to process %s: %s", path, e)
            result.add_error(f"Failed to process file: {e}")
        return result

    @abstractmethod
    def check(
        self,
        result: LintResult,
        data: dict[str, Any],
        body: str,
        path: Path,
        options: LintOptions,
    ) -> None:
        """Apply kind-specific heuristics to a parsed file."""
