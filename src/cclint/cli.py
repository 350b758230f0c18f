"""cclint CLI - Main entry point."""

from __future__ import annotations

import io
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cclint import __version__
from cclint.cli_utils import (
    EXIT_SYSTEM_ERROR,
    configure_logging,
    error,
    success,
    verbose_from_env,
    warning,
    write_report,
)
from cclint.core import detect_project, run_lint
from cclint.linters import LintOptions
from cclint.reporters import ConsoleReporter, JsonReporter, MarkdownReporter
from cclint.security import PathSecurityError
from cclint.summary import get_exit_code

app = typer.Typer(
    name="cclint",
    help="Lint Claude Code project files: agents, commands, settings and CLAUDE.md.",
    add_completion=False,
)

# Rich console for output
console = Console()

OUTPUT_FORMATS = ("console", "json", "markdown")
FAIL_ON_LEVELS = ("error", "warning", "suggestion")


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cclint version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Lint Claude Code project files: agents, commands, settings and CLAUDE.md."""
    pass


# -----------------------------------------------------------------------------
# Lint Command
# -----------------------------------------------------------------------------


@app.command()
def lint(
    root: str = typer.Option(
        ".",
        "--root",
        "-r",
        help="Project root directory (must be inside the current directory).",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show errors and warnings.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show clean files and debug logging.",
    ),
    output_format: str = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: console, json or markdown.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file instead of stdout.",
    ),
    fail_on: str = typer.Option(
        "error",
        "--fail-on",
        help="Exit non-zero at this level: error, warning or suggestion.",
    ),
    custom_schemas: bool = typer.Option(
        True,
        "--custom-schemas/--no-custom-schemas",
        help="Apply schema extensions from the project config.",
    ),
    parallel: bool = typer.Option(
        True,
        "--parallel/--no-parallel",
        help="Lint files in parallel.",
    ),
    concurrency: int = typer.Option(
        10,
        "--concurrency",
        min=1,
        help="Maximum number of files linted at once.",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        help="Follow symbolic links that stay inside the project root.",
    ),
    allow_scripts: bool = typer.Option(
        True,
        "--allow-scripts/--no-allow-scripts",
        help="Load Python configuration files (cclint.config.py, .cclintrc.py).",
    ),
    include: list[str] | None = typer.Option(
        None,
        "--include",
        help="Only report files matching this pattern (repeatable).",
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "--exclude",
        help="Do not report files matching this pattern (repeatable).",
    ),
) -> None:
    """Lint agents, commands, settings and project documentation.

    Exit codes:
    - 0: no findings at or above --fail-on
    - 1: findings at or above --fail-on, or invalid input
    - 2: system error (permissions, I/O)
    """
    verbose = verbose or verbose_from_env()
    configure_logging(verbose)

    if output_format not in OUTPUT_FORMATS:
        error(f"Invalid format '{output_format}'. Expected one of: {', '.join(OUTPUT_FORMATS)}")
    if fail_on not in FAIL_ON_LEVELS:
        error(f"Invalid --fail-on '{fail_on}'. Expected one of: {', '.join(FAIL_ON_LEVELS)}")

    options = LintOptions(
        quiet=quiet,
        verbose=verbose,
        fail_on=fail_on,  # type: ignore[arg-type]
        custom_schemas=custom_schemas,
        parallel=parallel,
        concurrency=concurrency,
        follow_symlinks=follow_symlinks,
        allow_scripts=allow_scripts,
        include_files=list(include or []),
        exclude_files=list(exclude or []),
    )

    try:
        summary = run_lint(root, options)
    except PathSecurityError as e:
        error(str(e))
    except OSError as e:
        error(f"Failed to lint project: {e}", exit_code=EXIT_SYSTEM_ERROR)

    if summary.total_files == 0 and not quiet:
        warning("No Claude Code files found")

    if output_format == "json":
        content = JsonReporter().report(summary)
    elif output_format == "markdown":
        content = MarkdownReporter().report(summary)
    else:
        report_console = Console(record=True, file=io.StringIO()) if output else console
        ConsoleReporter(options, report_console).report(summary)
        content = report_console.export_text() if output else ""

    if output is not None:
        try:
            write_report(content, output)
        except OSError as e:
            error(f"Failed to write report to {output}: {e}", exit_code=EXIT_SYSTEM_ERROR)
        if not quiet:
            success(f"Report written to {output}")
    elif content:
        typer.echo(content)

    raise typer.Exit(code=get_exit_code(summary, fail_on))


# -----------------------------------------------------------------------------
# Info Command
# -----------------------------------------------------------------------------


@app.command()
def info(
    root: str | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Project root. Defaults to the nearest directory with a project marker.",
    ),
    allow_scripts: bool = typer.Option(
        True,
        "--allow-scripts/--no-allow-scripts",
        help="Load Python configuration files (cclint.config.py, .cclintrc.py).",
    ),
) -> None:
    """Show what cclint detects about a project."""
    configure_logging(verbose_from_env())
    try:
        project = detect_project(root, allow_scripts=allow_scripts)
    except PathSecurityError as e:
        error(str(e))

    config = project.cclint_config
    table = Table(title="Project Information")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Root", str(project.root))
    table.add_row("Name", project.project_name or "-")
    table.add_row("Git repository", "yes" if project.has_git else "no")
    table.add_row(".claude directory", "yes" if project.has_claude_dir else "no")
    table.add_row("package.json", "yes" if project.has_package_json else "no")
    table.add_row("pyproject.toml", "yes" if project.has_pyproject else "no")
    table.add_row("Package manager", project.package_manager or "-")
    table.add_row("cclint config", str(config.source) if config and config.source else "-")

    console.print(table)
