"""CLI utility functions for cclint.

Provides helper functions for:
- Error formatting: Consistent user-friendly error messages with exit codes
- Logging setup: Routing library logging through rich on stderr
- Report output: Writing report files
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

# Exit code conventions
EXIT_USER_ERROR = 1  # User error (bad input, lint failures, unsafe path, etc.)
EXIT_SYSTEM_ERROR = 2  # System error (permissions, I/O, etc.)

VERBOSE_ENV_VAR = "CCLINT_VERBOSE"


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Args:
        msg: The error message to display.
        exit_code: Exit code to use (default: EXIT_USER_ERROR=1).

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def warning(msg: str) -> None:
    """Print a warning message to stderr."""
    styled_prefix = typer.style("Warning:", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)


def success(msg: str) -> None:
    """Print a success message to stdout."""
    styled_prefix = typer.style("Success:", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"{styled_prefix} {msg}")


# -----------------------------------------------------------------------------
# Logging Setup
# -----------------------------------------------------------------------------


def verbose_from_env() -> bool:
    """Check whether CCLINT_VERBOSE is set to a truthy value."""
    return os.environ.get(VERBOSE_ENV_VAR, "").strip().lower() not in ("", "0", "false", "no")


def configure_logging(verbose: bool = False) -> None:
    """Send cclint log records to stderr through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logger = logging.getLogger("cclint")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


# -----------------------------------------------------------------------------
# Report Output
# -----------------------------------------------------------------------------


def write_report(content: str, output_path: Path) -> None:
    """Write a report to output_path, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
