"""Project configuration for cclint.

Configuration lives in the project root. The first existing file wins:
.cclintrc.json > .cclintrc.yaml > .cclintrc.yml > pyproject.toml [tool.cclint]
> cclint.config.py > .cclintrc.py

Python configuration files can carry callables (custom validation hooks) and
pydantic models, so they are statically scanned before they are executed and
their ``config`` export is evaluated under a time budget.
"""

from __future__ import annotations

import ast
import asyncio
import importlib.util
import inspect
import json
import logging
import re
import threading
import time
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, get_args

import yaml
from pydantic import BaseModel

from cclint.security import PathSecurityError, is_within

logger = logging.getLogger(__name__)

UnknownFieldSeverity = Literal["error", "warning", "suggestion", "ignore"]
UNKNOWN_FIELD_SEVERITIES: tuple[str, ...] = get_args(UnknownFieldSeverity)

CONFIG_FILES: tuple[str, ...] = (
    ".cclintrc.json",
    ".cclintrc.yaml",
    ".cclintrc.yml",
    "pyproject.toml",
    "cclint.config.py",
    ".cclintrc.py",
)
SCRIPT_CONFIG_FILES = frozenset({"cclint.config.py", ".cclintrc.py"})

DEFAULT_TIMEOUT = 5.0

# Modules a configuration script may never import
_FORBIDDEN_MODULES = frozenset(
    {
        "os",
        "sys",
        "subprocess",
        "shutil",
        "socket",
        "ctypes",
        "importlib",
        "pathlib",
        "pickle",
        "marshal",
        "shelve",
        "urllib",
        "http",
        "ftplib",
        "smtplib",
        "multiprocessing",
        "threading",
        "signal",
        "tempfile",
        "io",
        "builtins",
        "code",
        "runpy",
        "types",
        "inspect",
        "gc",
    }
)

_FORBIDDEN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:eval|exec|compile|__import__)\s*\("), "dynamic code evaluation"),
    (re.compile(r"\btypes\s*\.\s*(?:FunctionType|CodeType)\b"), "dynamic code construction"),
    (re.compile(r"\bopen\s*\("), "file access"),
    (re.compile(r"\bglobals\s*\(|\blocals\s*\(|\bvars\s*\("), "namespace access"),
    (re.compile(r"\b__builtins__\b|\bbuiltins\b"), "builtins access"),
    (re.compile(r"\bsetattr\s*\(|\bdelattr\s*\("), "global object mutation"),
    (re.compile(r"\b__subclasses__\b|\b__globals__\b|\b__code__\b"), "interpreter internals"),
)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


class ConfigSecurityError(Exception):
    """Raised when a configuration file fails a security check."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else ""
        super().__init__(message)


# -----------------------------------------------------------------------------
# Config Model
# -----------------------------------------------------------------------------


@dataclass
class SchemaConfig:
    """Schema customisation for one artifact kind.

    Attributes:
        extend: Extra fields added to the base schema, by document key.
        override: Full replacement schema: a field mapping or a pydantic model.
        custom_validation: Called with the parsed data; returns error strings.
    """

    extend: dict[str, Any] = field(default_factory=dict)
    override: Mapping[str, Any] | type[BaseModel] | None = None
    custom_validation: Callable[[dict[str, Any]], list[str]] | None = None


@dataclass
class ClaudeMdRules:
    """Rules for the project documentation file.

    None for a section list means the built-in defaults are used.
    """

    required_sections: list[str] | None = None
    recommended_sections: list[str] | None = None
    custom_validation: Callable[[str, list[str]], list[str]] | None = None


@dataclass
class LintRules:
    """Global linting rules."""

    unknown_fields: UnknownFieldSeverity = "warning"
    strict: bool = True
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)


@dataclass
class CclintConfig:
    """Resolved cclint configuration for one project."""

    agent_schema: SchemaConfig = field(default_factory=SchemaConfig)
    command_schema: SchemaConfig = field(default_factory=SchemaConfig)
    settings_schema: SchemaConfig = field(default_factory=SchemaConfig)
    claude_md_rules: ClaudeMdRules = field(default_factory=ClaudeMdRules)
    rules: LintRules = field(default_factory=LintRules)
    source: Path | None = None

    def schema_for(self, kind: str) -> SchemaConfig:
        """Return the schema customisation for "agent", "command" or "settings"."""
        return {
            "agent": self.agent_schema,
            "command": self.command_schema,
            "settings": self.settings_schema,
        }[kind]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> CclintConfig:
        """Build a config from a raw mapping, filling in defaults.

        Keys may be camelCase or snake_case. Values of the wrong type are
        dropped in favour of the default; run validate_config first to
        report them.

        Args:
            data: Raw configuration mapping.
            source: File the mapping was loaded from.

        Returns:
            The defaults-merged configuration.
        """
        raw = _normalize_keys(data)
        return cls(
            agent_schema=_schema_config(raw.get("agent_schema")),
            command_schema=_schema_config(raw.get("command_schema")),
            settings_schema=_schema_config(raw.get("settings_schema")),
            claude_md_rules=_claude_md_rules(raw.get("claude_md_rules")),
            rules=_lint_rules(raw.get("rules")),
            source=source,
        )


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_snake(k) if isinstance(k, str) else k: v for k, v in data.items()}


def _string_list(value: Any) -> list[str] | None:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def _is_model_class(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseModel)


def _schema_config(value: Any) -> SchemaConfig:
    if isinstance(value, SchemaConfig):
        return value
    if not isinstance(value, Mapping):
        return SchemaConfig()

    raw = _normalize_keys(value)
    extend = raw.get("extend")
    override = raw.get("override")
    custom = raw.get("custom_validation")
    return SchemaConfig(
        extend=dict(extend) if isinstance(extend, Mapping) else {},
        override=override if isinstance(override, Mapping) or _is_model_class(override) else None,
        custom_validation=custom if callable(custom) else None,
    )


def _claude_md_rules(value: Any) -> ClaudeMdRules:
    if isinstance(value, ClaudeMdRules):
        return value
    if not isinstance(value, Mapping):
        return ClaudeMdRules()

    raw = _normalize_keys(value)
    custom = raw.get("custom_validation")
    return ClaudeMdRules(
        required_sections=_string_list(raw.get("required_sections")),
        recommended_sections=_string_list(raw.get("recommended_sections")),
        custom_validation=custom if callable(custom) else None,
    )


def _lint_rules(value: Any) -> LintRules:
    if isinstance(value, LintRules):
        return value
    if not isinstance(value, Mapping):
        return LintRules()

    raw = _normalize_keys(value)
    rules = LintRules()
    if raw.get("unknown_fields") in UNKNOWN_FIELD_SEVERITIES:
        rules.unknown_fields = raw["unknown_fields"]
    if isinstance(raw.get("strict"), bool):
        rules.strict = raw["strict"]
    rules.include_patterns = _string_list(raw.get("include_patterns")) or []
    rules.exclude_patterns = _string_list(raw.get("exclude_patterns")) or []
    return rules


def validate_config(data: Any) -> list[str]:
    """Check the structure of a raw configuration mapping.

    Args:
        data: Raw configuration, as parsed from a config file.

    Returns:
        List of error messages. Empty if the structure is valid.
    """
    if not isinstance(data, Mapping):
        return ["Configuration must be an object"]

    errors: list[str] = []
    raw = _normalize_keys(data)

    for key, label in (
        ("agent_schema", "agentSchema"),
        ("command_schema", "commandSchema"),
        ("settings_schema", "settingsSchema"),
    ):
        schema = raw.get(key)
        if schema is None:
            continue
        if not isinstance(schema, Mapping):
            errors.append(f"{label} must be an object")
            continue

        schema = _normalize_keys(schema)
        if schema.get("extend") is not None and not isinstance(schema["extend"], Mapping):
            errors.append(f"{label}.extend must be an object")
        override = schema.get("override")
        if override is not None and not (isinstance(override, Mapping) or _is_model_class(override)):
            errors.append(f"{label}.override must be an object or a pydantic model")
        custom = schema.get("custom_validation")
        if custom is not None and not callable(custom):
            errors.append(f"{label}.customValidation must be a function")

    md_rules = raw.get("claude_md_rules")
    if md_rules is not None:
        if not isinstance(md_rules, Mapping):
            errors.append("claudeMdRules must be an object")
        else:
            md_rules = _normalize_keys(md_rules)
            for key, label in (
                ("required_sections", "requiredSections"),
                ("recommended_sections", "recommendedSections"),
            ):
                if md_rules.get(key) is not None and not isinstance(md_rules[key], list):
                    errors.append(f"claudeMdRules.{label} must be an array")
            custom = md_rules.get("custom_validation")
            if custom is not None and not callable(custom):
                errors.append("claudeMdRules.customValidation must be a function")

    rules = raw.get("rules")
    if rules is not None:
        if not isinstance(rules, Mapping):
            errors.append("rules must be an object")
        else:
            rules = _normalize_keys(rules)
            severity = rules.get("unknown_fields")
            if severity is not None and severity not in UNKNOWN_FIELD_SEVERITIES:
                errors.append(
                    "rules.unknownFields must be one of: " + ", ".join(UNKNOWN_FIELD_SEVERITIES)
                )
            if "strict" in rules and not isinstance(rules["strict"], bool):
                errors.append("rules.strict must be a boolean")
            for key, label in (
                ("include_patterns", "includePatterns"),
                ("exclude_patterns", "excludePatterns"),
            ):
                if rules.get(key) is not None and not isinstance(rules[key], list):
                    errors.append(f"rules.{label} must be an array")

    return errors


# -----------------------------------------------------------------------------
# File Loading
# -----------------------------------------------------------------------------


def _check_project_root(project_root: str | Path) -> Path:
    raw = str(project_root)
    if not raw.strip() or "\0" in raw or ".." in Path(raw).parts:
        raise PathSecurityError(f"Invalid project root path: {raw!r}", raw)
    return Path(raw).resolve()


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        OSError: If the file cannot be read.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _pyproject_section(path: Path) -> Any:
    """Return the [tool.cclint] table of a pyproject.toml, or None."""
    try:
        data = _load_toml_file(path)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.debug("Skipping unreadable %s: %s", path, e)
        return None
    tool = data.get("tool")
    return tool.get("cclint") if isinstance(tool, dict) else None


def find_config_file(project_root: str | Path) -> Path | None:
    """Find the configuration file that applies to a project.

    Args:
        project_root: The project root directory.

    Returns:
        Path to the first existing config file, or None. Files whose real path
        lies outside the project root are skipped, as is a pyproject.toml
        without a [tool.cclint] table.

    Raises:
        PathSecurityError: If project_root contains traversal segments.
    """
    root = _check_project_root(project_root)
    if not root.is_dir():
        return None

    for name in CONFIG_FILES:
        candidate = root / name
        if not candidate.is_file():
            continue
        if not is_within(candidate.resolve(), root):
            logger.warning("Skipping config file outside project root: %s", candidate)
            continue
        if name == "pyproject.toml" and _pyproject_section(candidate) is None:
            continue
        return candidate
    return None


def _imported_modules(tree: ast.AST) -> list[str]:
    """Collect every module named by an import statement anywhere in tree."""
    modules: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            modules.append(node.module)
    return modules


def scan_script_source(source: str, path: Path | None = None) -> None:
    """Reject configuration scripts that reach beyond plain data.

    Raises:
        ConfigSecurityError: If the source imports a forbidden module or uses a
            forbidden construct.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError as e:
        raise ConfigSecurityError(f"Configuration is not valid Python: {e.msg}", path) from e

    for module in _imported_modules(tree):
        if module.split(".")[0] in _FORBIDDEN_MODULES:
            raise ConfigSecurityError(
                f"Configuration imports forbidden module '{module}'", path
            )

    for pattern, reason in _FORBIDDEN_PATTERNS:
        match = pattern.search(source)
        if match:
            raise ConfigSecurityError(
                f"Configuration contains a forbidden construct ({reason}): {match.group(0)!r}",
                path,
            )


def _evaluate_script(path: Path, deadline: float) -> Any:
    """Execute a config script and resolve its export. Runs in a worker thread."""
    spec = importlib.util.spec_from_file_location(f"_cclint_config_{abs(hash(path))}", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load configuration module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    export = getattr(module, "config", None)
    if export is None:
        export = getattr(module, "default", None)
    if export is None:
        raise ValueError("Configuration script must define 'config' or 'default'")

    if callable(export) and not _is_model_class(export):
        export = export()
    if inspect.isawaitable(export):

        async def _wait(awaitable: Any) -> Any:
            return await asyncio.wait_for(awaitable, max(deadline - time.monotonic(), 0.0))

        export = asyncio.run(_wait(export))
    return export


class ConfigLoader:
    """Loads and caches project configuration.

    The cache is keyed by (resolved project root, allow_scripts) and holds
    failures as None, so every root is read at most once per process.
    """

    def __init__(self, allow_scripts: bool = True, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.allow_scripts = allow_scripts
        self.timeout = timeout
        self._cache: dict[tuple[str, bool], CclintConfig | None] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[tuple[str, bool], threading.Lock] = {}

    def clear(self) -> None:
        """Forget every cached configuration."""
        with self._lock:
            self._cache.clear()
            self._key_locks.clear()

    def load(
        self, project_root: str | Path, *, allow_scripts: bool | None = None
    ) -> CclintConfig | None:
        """Load the configuration for a project root.

        Args:
            project_root: The project root directory.
            allow_scripts: Override the loader's script policy for this call.

        Returns:
            The configuration, or None when there is no usable config file.

        Raises:
            PathSecurityError: If project_root contains traversal segments.
        """
        root = _check_project_root(project_root)
        scripts = self.allow_scripts if allow_scripts is None else allow_scripts
        key = (str(root), scripts)

        # One lock per key: concurrent callers for the same root share a single
        # load, while a slow root never blocks the others.
        with self._lock:
            if key in self._cache:
                return self._cache[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._cache:
                    return self._cache[key]
            config = self._load_uncached(root, scripts)
            with self._lock:
                self._cache[key] = config
            return config

    def _load_uncached(self, root: Path, allow_scripts: bool) -> CclintConfig | None:
        path = find_config_file(root)
        if path is None:
            return None
        if path.name in SCRIPT_CONFIG_FILES and not allow_scripts:
            logger.debug("Script configuration disabled, ignoring %s", path)
            return None

        try:
            if path.name in SCRIPT_CONFIG_FILES:
                data = self._load_script(path, root)
            else:
                data = self._load_structured(path)
        except ConfigSecurityError as e:
            logger.warning("Refusing to load %s: %s", path, e)
            return None
        except (OSError, ValueError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            logger.debug("Failed to load config from %s: %s", path, e)
            return None

        if isinstance(data, CclintConfig):
            data.source = path
            return data
        if not isinstance(data, Mapping):
            logger.debug("Ignoring %s: configuration must be an object", path)
            return None

        for problem in validate_config(data):
            logger.debug("Configuration problem in %s: %s", path, problem)
        return CclintConfig.from_dict(data, source=path)

    def _load_structured(self, path: Path) -> Any:
        if path.name == "pyproject.toml":
            return _pyproject_section(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)

    def _load_script(self, path: Path, root: Path) -> Any:
        if path.name not in SCRIPT_CONFIG_FILES:
            raise ConfigSecurityError(f"Not an allowed script config file: {path.name}", path)
        real = path.resolve()
        if not is_within(real, root):
            raise ConfigSecurityError("Configuration script resolves outside project root", path)

        scan_script_source(real.read_text(encoding="utf-8"), path)

        outcome: dict[str, Any] = {}
        deadline = time.monotonic() + self.timeout

        def target() -> None:
            try:
                outcome["value"] = _evaluate_script(real, deadline)
            except BaseException as e:  # reported to the calling thread
                outcome["error"] = e

        worker = threading.Thread(target=target, name="cclint-config", daemon=True)
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            logger.debug("Configuration %s timed out after %.1fs", path, self.timeout)
            return None
        if "error" in outcome:
            logger.debug("Configuration %s raised: %s", path, outcome["error"])
            return None
        return outcome.get("value")


_default_loader = ConfigLoader()


def load_config(project_root: str | Path, *, allow_scripts: bool = True) -> CclintConfig | None:
    """Load a project's configuration through the shared, cached loader."""
    return _default_loader.load(project_root, allow_scripts=allow_scripts)


def clear_config_cache() -> None:
    """Clear the shared loader's cache."""
    _default_loader.clear()
