"""cclint - Linter for Claude Code project files."""

__version__ = "1.0.0"

from cclint.config import (  # noqa: E402
    CclintConfig,
    ConfigSecurityError,
    clear_config_cache,
    load_config,
    validate_config,
)
from cclint.core import (  # noqa: E402
    detect_project,
    lint_agents,
    lint_commands,
    lint_docs,
    lint_files,
    lint_settings,
    load_project_config,
    run_lint,
)
from cclint.linters import LintOptions, LintResult  # noqa: E402
from cclint.schemas import get_schema  # noqa: E402
from cclint.sdk import CClint  # noqa: E402
from cclint.security import PathSecurityError, is_path_safe, resolve_secure  # noqa: E402
from cclint.summary import LintSummary  # noqa: E402

__all__ = [
    "__version__",
    # Linting
    "run_lint",
    "lint_files",
    "lint_agents",
    "lint_commands",
    "lint_settings",
    "lint_docs",
    "CClint",
    "LintOptions",
    "LintResult",
    "LintSummary",
    # Project and configuration
    "detect_project",
    "load_project_config",
    "CclintConfig",
    "load_config",
    "clear_config_cache",
    "validate_config",
    "get_schema",
    # Path security
    "PathSecurityError",
    "ConfigSecurityError",
    "resolve_secure",
    "is_path_safe",
]
