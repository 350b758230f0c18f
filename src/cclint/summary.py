"""Aggregation of lint results and exit-code policy."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from cclint.linters.base import LintResult


@dataclass(frozen=True)
class LintSummary:
    """Totals over a set of lint results.

    Attributes:
        total_files: Number of results.
        valid_files: Number of results without errors.
        total_errors: Errors, plus custom schema errors counted once more.
        total_warnings: Warnings across all results.
        total_suggestions: Suggestions across all results.
        total_unused_fields: Unknown fields across all results.
        duration: Wall time of the run, in milliseconds.
        results: The results themselves.
    """

    total_files: int = 0
    valid_files: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    total_suggestions: int = 0
    total_unused_fields: int = 0
    duration: int = 0
    results: list[LintResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "totalFiles": self.total_files,
            "validFiles": self.valid_files,
            "totalErrors": self.total_errors,
            "totalWarnings": self.total_warnings,
            "totalSuggestions": self.total_suggestions,
            "totalUnusedFields": self.total_unused_fields,
            "duration": self.duration,
            "results": [r.to_dict() for r in self.results],
        }


def calculate_summary(results: Sequence[LintResult], start_time: float) -> LintSummary:
    """Build the summary of a run.

    Args:
        results: Results of every linter.
        start_time: ``time.monotonic()`` taken when the run started.

    Returns:
        The summary. Custom schema errors are mirrored into each result's
        errors and are counted a second time here.
    """
    return LintSummary(
        total_files=len(results),
        valid_files=sum(1 for r in results if r.valid),
        total_errors=sum(len(r.errors) + len(r.custom_schema_errors or []) for r in results),
        total_warnings=sum(len(r.warnings) for r in results),
        total_suggestions=sum(len(r.suggestions) for r in results),
        total_unused_fields=sum(len(r.unused_fields) for r in results),
        duration=max(0, round((time.monotonic() - start_time) * 1000)),
        results=list(results),
    )


def should_fail_build(summary: LintSummary, fail_on: str = "error") -> bool:
    """Decide whether a run fails at the given threshold.

    Unknown thresholds behave like "error".
    """
    if fail_on == "warning":
        return summary.total_errors > 0 or summary.total_warnings > 0
    if fail_on == "suggestion":
        return (
            summary.total_errors > 0
            or summary.total_warnings > 0
            or summary.total_suggestions > 0
        )
    return summary.total_errors > 0


def get_exit_code(summary: LintSummary, fail_on: str = "error") -> int:
    return 1 if should_fail_build(summary, fail_on) else 0


def format_duration(ms: int | float) -> str:
    """Format milliseconds as "250ms" or "1.5s"."""
    if ms < 1000:
        return f"{round(ms)}ms"
    seconds = round(ms / 100) / 10
    return f"{seconds:g}s"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "2 files" style text."""
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"
