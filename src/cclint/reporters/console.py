"""Terminal report writer using rich."""

from __future__ import annotations

import os

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cclint.linters.base import LintOptions, LintResult
from cclint.summary import LintSummary, format_duration, pluralize


def relative_path(file: str) -> str:
    """Show a path relative to cwd when it lies beneath it."""
    cwd = os.getcwd()
    if file.startswith(cwd + os.sep):
        return file[len(cwd) + 1 :]
    return file


class ConsoleReporter:
    """Prints per-file findings and a summary table.

    Args:
        options: quiet hides suggestions; verbose also lists clean files.
        console: Console to print to. Defaults to stdout.
    """

    def __init__(self, options: LintOptions | None = None, console: Console | None = None) -> None:
        self.options = options or LintOptions()
        self.console = console or Console()

    def report(self, summary: LintSummary) -> None:
        if not self.options.quiet:
            self.console.print("\n[bold blue]Claude Code Lint Report[/bold blue]\n")

        for result in summary.results:
            self._print_result(result)

        self._print_summary(summary)

    def _is_clean(self, result: LintResult) -> bool:
        return result.valid and not result.has_findings and not result.unused_fields

    def _print_result(self, result: LintResult) -> None:
        if self._is_clean(result) and not self.options.verbose:
            return

        self.console.print(f"\n[bold]{escape(relative_path(result.file))}:[/bold]")
        if self._is_clean(result):
            self.console.print("  [green]✓ Valid[/green]")
            return

        for message in result.errors:
            self.console.print(f"  [red]✗ {escape(message)}[/red]")
        for message in result.warnings:
            self.console.print(f"  [yellow]⚠ {escape(message)}[/yellow]")
        if result.unused_fields:
            fields = escape(", ".join(result.unused_fields))
            self.console.print(f"  [yellow]⚠ Unused fields: {fields}[/yellow]")
        if not self.options.quiet:
            for message in result.suggestions:
                self.console.print(f"  [dim]💡 {escape(message)}[/dim]")

    @staticmethod
    def _count(value: int, style: str) -> str:
        return f"[green]{value}[/green]" if value == 0 else f"[{style}]{value}[/{style}]"

    def _print_summary(self, summary: LintSummary) -> None:
        table = Table(title="Summary", show_header=False, title_justify="left")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        table.add_row("Files checked", str(summary.total_files))
        table.add_row("Valid files", f"[green]{summary.valid_files}[/green]")
        table.add_row("Errors", self._count(summary.total_errors, "red"))
        table.add_row("Warnings", self._count(summary.total_warnings, "yellow"))
        table.add_row("Suggestions", self._count(summary.total_suggestions, "cyan"))
        table.add_row("Unused fields", self._count(summary.total_unused_fields, "yellow"))
        table.add_row("Duration", format_duration(summary.duration))

        self.console.print()
        self.console.print(table)

        if summary.total_errors > 0:
            count = pluralize(summary.total_errors, "error")
            self.console.print(f"\n[red]Linting failed with errors ({count})[/red]")
        elif summary.total_warnings > 0:
            count = pluralize(summary.total_warnings, "warning")
            self.console.print(f"\n[yellow]Linting completed with warnings ({count})[/yellow]")
        elif summary.total_suggestions > 0 and not self.options.quiet:
            self.console.print(
                "\n[cyan]All files are valid! (with suggestions for improvements)[/cyan]"
            )
        else:
            self.console.print("\n[green]All files are valid![/green]")
