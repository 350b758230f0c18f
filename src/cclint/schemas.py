"""Validation schemas for Claude Code project files.

Each artifact kind (agent, command, settings) has a fixed pydantic base model.
Project configuration can widen a base model with extra fields (``extend``) or
replace it entirely (``override``); ``rules.strict`` chooses whether unknown
fields are rejected or passed through.

Extension fields are usually declared with a small declarative format so that
JSON/YAML/TOML configuration never needs code::

    {"priority": {"type": "integer", "minimum": 1, "maximum": 5},
     "tags": {"type": "array", "items": "string"},
     "category": {"type": "string", "enum": ["general", "testing"]}}

Python configuration files may also pass plain annotations or
``(annotation, default)`` tuples, following ``pydantic.create_model``.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
    field_validator,
)
from pydantic.fields import FieldInfo

if TYPE_CHECKING:
    from cclint.config import CclintConfig

SchemaKind = Literal["agent", "command", "settings"]

ModelName = Literal["sonnet", "opus", "haiku", "sonnet[1m]", "opusplan", "inherit"]
VALID_MODELS: tuple[str, ...] = get_args(ModelName)

# Claude Code only renders these eight agent colors
VALID_CLAUDE_COLORS: tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "yellow",
    "purple",
    "orange",
    "pink",
    "cyan",
)

KNOWN_CLAUDE_TOOLS = frozenset(
    {
        "Read",
        "Write",
        "Edit",
        "MultiEdit",
        "Bash",
        "Grep",
        "Glob",
        "LS",
        "Task",
        "NotebookEdit",
        "WebFetch",
        "WebSearch",
        "TodoWrite",
        "BashOutput",
        "KillBash",
        "ExitPlanMode",
    }
)

MCP_TOOL_PREFIX = "mcp__"

VALID_HOOK_EVENTS: tuple[str, ...] = (
    "PreToolUse",
    "PostToolUse",
    "Notification",
    "UserPromptSubmit",
    "Stop",
    "SubagentStop",
    "SessionEnd",
    "PreCompact",
    "SessionStart",
)

REQUIRED_CLAUDE_MD_SECTIONS: tuple[str, ...] = (
    "navigating the codebase",
    "build & commands",
    "using subagents",
    "code style",
    "testing",
    "security",
    "configuration",
)

RECOMMENDED_CLAUDE_MD_SECTIONS: tuple[str, ...] = (
    "git commit conventions",
    "architecture",
    "naming conventions",
    "cli tools reference",
)


# -----------------------------------------------------------------------------
# Base Schemas
# -----------------------------------------------------------------------------


ToolList = Union[StrictStr, list[StrictStr]]


class AgentFrontmatter(BaseModel):
    """Front matter of an agent / subagent definition file."""

    model_config = ConfigDict(extra="forbid")

    name: Annotated[
        StrictStr,
        Field(
            min_length=1,
            pattern=r"^[a-z0-9-]+$",
            description="Agent identifier: lowercase letters, numbers and hyphens",
        ),
    ]
    description: Annotated[
        StrictStr,
        Field(min_length=1, description="When this subagent should be invoked"),
    ]
    tools: ToolList | None = Field(
        default=None,
        description='Tool access: "*" for all, a list of tool names, or omit to inherit',
    )
    allowed_tools: ToolList | None = Field(
        default=None,
        alias="allowed-tools",
        description="Alternative name for the tools field",
    )
    model: ModelName | None = None
    color: StrictStr | None = None

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        if value is None or value.lower() in VALID_CLAUDE_COLORS:
            return value
        raise ValueError(
            f'Color "{value}" is not a valid Claude Code color. '
            f"Valid colors are: {', '.join(VALID_CLAUDE_COLORS)}"
        )


class CommandFrontmatter(BaseModel):
    """Front matter of a slash command file. Every field is optional."""

    model_config = ConfigDict(extra="forbid")

    allowed_tools: StrictStr | None = Field(default=None, alias="allowed-tools")
    argument_hint: StrictStr | None = Field(default=None, alias="argument-hint")
    description: StrictStr | None = None
    model: ModelName | None = None


class HookCommand(BaseModel):
    """A single hook action."""

    type: Literal["command"]
    command: StrictStr
    timeout: StrictInt | None = None


class HookMatcher(BaseModel):
    """A matcher plus the hooks it triggers."""

    matcher: StrictStr
    hooks: list[HookCommand]


class ClaudeSettings(BaseModel):
    """Project ``.claude/settings.json``.

    Event names under ``hooks`` are free-form here; the settings linter checks
    them against VALID_HOOK_EVENTS and only warns.
    """

    model_config = ConfigDict(extra="forbid")

    hooks: dict[str, list[HookMatcher]] | None = None
    schema_url: StrictStr | None = Field(default=None, alias="$schema")
    permissions: dict[str, Any] | None = None
    env: dict[str, StrictStr] | None = None
    model: StrictStr | None = None
    api_key_helper: StrictStr | None = Field(default=None, alias="apiKeyHelper")
    cleanup_period_days: StrictInt | None = Field(default=None, alias="cleanupPeriodDays")
    include_co_authored_by: StrictBool | None = Field(default=None, alias="includeCoAuthoredBy")
    status_line: dict[str, Any] | None = Field(default=None, alias="statusLine")
    output_style: StrictStr | None = Field(default=None, alias="outputStyle")
    force_login_method: StrictStr | None = Field(default=None, alias="forceLoginMethod")
    disable_all_hooks: StrictBool | None = Field(default=None, alias="disableAllHooks")
    enable_all_project_mcp_servers: StrictBool | None = Field(
        default=None, alias="enableAllProjectMcpServers"
    )
    enabled_mcpjson_servers: list[StrictStr] | None = Field(
        default=None, alias="enabledMcpjsonServers"
    )
    disabled_mcpjson_servers: list[StrictStr] | None = Field(
        default=None, alias="disabledMcpjsonServers"
    )


BASE_SCHEMAS: dict[str, type[BaseModel]] = {
    "agent": AgentFrontmatter,
    "command": CommandFrontmatter,
    "settings": ClaudeSettings,
}


# -----------------------------------------------------------------------------
# Declarative Field Specs
# -----------------------------------------------------------------------------


_TYPE_MAP: dict[str, Any] = {
    "string": StrictStr,
    "integer": StrictInt,
    "number": StrictFloat,
    "boolean": StrictBool,
    "array": list[Any],
    "object": dict[str, Any],
    "any": Any,
}

_SPEC_KEYS = frozenset(
    {
        "type",
        "required",
        "enum",
        "pattern",
        "minLength",
        "maxLength",
        "minimum",
        "maximum",
        "items",
        "properties",
        "default",
        "description",
    }
)


def _annotation_from_spec(name: str, spec: Mapping[str, Any]) -> Any:
    """Build a type annotation from a declarative spec mapping."""
    unknown = set(spec) - _SPEC_KEYS
    if unknown:
        raise ValueError(f"Field '{name}' has unknown spec keys: {', '.join(sorted(unknown))}")

    if "enum" in spec:
        values = spec["enum"]
        if not isinstance(values, list) or not values:
            raise ValueError(f"Field '{name}': enum must be a non-empty list")
        return Literal[tuple(values)]

    type_name = spec.get("type", "any")
    if type_name not in _TYPE_MAP:
        raise ValueError(
            f"Field '{name}' has unknown type '{type_name}'. "
            f"Expected one of: {', '.join(_TYPE_MAP)}"
        )

    if type_name == "array" and "items" in spec:
        item_annotation, _ = field_from_spec(f"{name}[]", spec["items"])
        return list[item_annotation]  # type: ignore[valid-type]

    if type_name == "object" and "properties" in spec:
        properties = spec["properties"]
        if not isinstance(properties, Mapping):
            raise ValueError(f"Field '{name}': properties must be an object")
        return build_model(f"{_python_name(name)}_object", properties, extra="ignore")

    return _TYPE_MAP[type_name]


def _constraints_from_spec(spec: Mapping[str, Any]) -> dict[str, Any]:
    constraints: dict[str, Any] = {}
    if "pattern" in spec:
        constraints["pattern"] = spec["pattern"]
    if "minLength" in spec:
        constraints["min_length"] = spec["minLength"]
    if "maxLength" in spec:
        constraints["max_length"] = spec["maxLength"]
    if "minimum" in spec:
        constraints["ge"] = spec["minimum"]
    if "maximum" in spec:
        constraints["le"] = spec["maximum"]
    if "description" in spec:
        constraints["description"] = spec["description"]
    return constraints


def field_from_spec(name: str, spec: Any) -> tuple[Any, FieldInfo]:
    """Turn one extension field spec into a ``(annotation, FieldInfo)`` pair.

    Args:
        name: The field name as it appears in the validated document.
        spec: A type name, a declarative mapping, an ``(annotation, default)``
            tuple, or a bare annotation.

    Returns:
        Annotation and FieldInfo suitable for ``pydantic.create_model``.

    Raises:
        ValueError: If a declarative spec is malformed.
    """
    if isinstance(spec, str):
        spec = {"type": spec}

    if isinstance(spec, Mapping):
        annotation = _annotation_from_spec(name, spec)
        constraints = _constraints_from_spec(spec)
        if spec.get("required", False):
            return annotation, Field(..., alias=name, **constraints)
        default = spec.get("default")
        return annotation_or_optional(annotation), Field(default, alias=name, **constraints)

    if isinstance(spec, tuple) and len(spec) == 2:
        annotation, default = spec
        if isinstance(default, FieldInfo):
            return Annotated[annotation, default], Field(alias=name)
        return annotation, Field(default, alias=name)

    if isinstance(spec, FieldInfo):
        raise ValueError(f"Field '{name}': pass (annotation, Field(...)) instead of a bare Field")

    return annotation_or_optional(spec), Field(None, alias=name)


def annotation_or_optional(annotation: Any) -> Any:
    """Allow None for an optional Python-annotated field."""
    if annotation is Any:
        return annotation
    return Union[annotation, None]


def _python_name(name: str) -> str:
    """Map a document key to a safe Python attribute name."""
    if (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not name.startswith("model_")
        and not hasattr(BaseModel, name)
    ):
        return name
    return "field_" + re.sub(r"\W", "_", name).strip("_")


def build_model(
    model_name: str,
    fields: Mapping[str, Any],
    *,
    base: type[BaseModel] | None = None,
    extra: Literal["forbid", "allow", "ignore"] = "forbid",
) -> type[BaseModel]:
    """Create a pydantic model from a mapping of field specs.

    Args:
        model_name: Name of the generated model class.
        fields: Mapping of document key to field spec.
        base: Optional model to extend. Fields with a matching key replace the
            base field.
        extra: Unknown-field policy for the generated model.

    Returns:
        The generated model class.
    """
    existing: dict[str, str] = {}
    if base is not None:
        for attr, info in base.model_fields.items():
            existing[info.alias or attr] = attr

    definitions: dict[str, Any] = {}
    for key, spec in fields.items():
        if not isinstance(key, str) or not key:
            raise ValueError(f"Schema field names must be non-empty strings, got {key!r}")
        attr = existing.get(key) or _python_name(key)
        definitions[attr] = field_from_spec(key, spec)

    if base is None:
        return create_model(  # type: ignore[call-overload, no-any-return]
            model_name, __config__=ConfigDict(extra=extra), **definitions
        )

    extended = create_model(  # type: ignore[call-overload]
        model_name, __base__=base, **definitions
    )
    return with_extra_policy(extended, extra)


def with_extra_policy(
    model: type[BaseModel], extra: Literal["forbid", "allow", "ignore"]
) -> type[BaseModel]:
    """Return model, or a subclass of it, using the given unknown-field policy."""
    if model.model_config.get("extra") == extra:
        return model
    return type(model.__name__, (model,), {"model_config": ConfigDict(extra=extra)})


# -----------------------------------------------------------------------------
# Schema Composition
# -----------------------------------------------------------------------------


def get_schema(
    kind: SchemaKind,
    config: CclintConfig | None = None,
    *,
    use_extensions: bool = True,
) -> type[BaseModel]:
    """Compose the validation schema for an artifact kind.

    Args:
        kind: "agent", "command" or "settings".
        config: Project configuration. None means the strict base schema.
        use_extensions: If False, ``extend`` and ``override`` are ignored.

    Returns:
        A pydantic model class to validate parsed data against.

    Raises:
        KeyError: If kind is unknown.
        ValueError: If the configured extension specs are malformed.
    """
    base = BASE_SCHEMAS[kind]
    strict = True if config is None else config.rules.strict is not False
    extra: Literal["forbid", "allow"] = "forbid" if strict else "allow"

    schema_config = config.schema_for(kind) if config is not None else None
    if not use_extensions or schema_config is None:
        return with_extra_policy(base, extra)

    override = schema_config.override
    if override is not None:
        if isinstance(override, type) and issubclass(override, BaseModel):
            return override
        if isinstance(override, Mapping):
            return build_model(f"{base.__name__}Override", override, extra=extra)
        raise ValueError(f"{kind} schema override must be a pydantic model or a field mapping")

    if schema_config.extend:
        return build_model(f"Extended{base.__name__}", schema_config.extend, base=base, extra=extra)

    return with_extra_policy(base, extra)
