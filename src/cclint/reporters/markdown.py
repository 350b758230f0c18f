"""Markdown report writer."""

from __future__ import annotations

from datetime import datetime, timezone

from cclint.linters.base import LintResult
from cclint.reporters.console import relative_path
from cclint.summary import LintSummary


class MarkdownReporter:
    """Renders a summary as a Markdown document."""

    def report(self, summary: LintSummary) -> str:
        sections = [
            "# Claude Code Lint Report\n",
            f"Generated on: {datetime.now(timezone.utc).isoformat()}\n",
            self._summary(summary),
        ]

        file_reports = [self._file_report(r) for r in summary.results if r.has_findings]
        if file_reports:
            sections.append("## Detailed Results\n")
            sections.extend(file_reports)

        sections.append(self._recommendations(summary))
        return "\n".join(sections)

    def _summary(self, summary: LintSummary) -> str:
        lines = [
            "## Summary\n",
            "| Metric | Count |",
            "|--------|-------|",
            f"| Files checked | {summary.total_files} |",
            f"| Valid files | {summary.valid_files} |",
            f"| Errors | {summary.total_errors} |",
            f"| Warnings | {summary.total_warnings} |",
            f"| Suggestions | {summary.total_suggestions} |",
            f"| Unused fields | {summary.total_unused_fields} |",
            f"| Duration | {summary.duration}ms |",
            "",
        ]
        if summary.total_errors > 0:
            lines.append("**Status:** ❌ Failed with errors\n")
        elif summary.total_warnings > 0:
            lines.append("**Status:** ⚠️ Completed with warnings\n")
        else:
            lines.append("**Status:** ✅ All checks passed\n")
        return "\n".join(lines)

    def _file_report(self, result: LintResult) -> str:
        lines = [f"### `{relative_path(result.file)}`\n"]
        for title, icon, messages in (
            ("Errors", "❌", result.errors),
            ("Warnings", "⚠️", result.warnings),
            ("Suggestions", "💡", result.suggestions),
        ):
            if messages:
                lines.append(f"**{title}:**\n")
                lines.extend(f"- {icon} {m}" for m in messages)
                lines.append("")
        return "\n".join(lines)

    def _recommendations(self, summary: LintSummary) -> str:
        lines = ["## Recommendations\n"]
        if summary.total_errors > 0:
            lines.append("### Priority: High (Errors)\n")
            lines.append(
                "Fix all errors before proceeding. Errors indicate invalid configurations "
                "that may cause issues.\n"
            )
        if summary.total_warnings > 0:
            lines.append("### Priority: Medium (Warnings)\n")
            lines.append(
                "Address warnings to improve configuration quality and avoid potential issues.\n"
            )
        if summary.total_suggestions > 0:
            lines.append("### Priority: Optional (Improvements)\n")
            lines.append("Consider implementing suggestions to enhance your Claude Code setup.\n")
        if len(lines) == 1:
            lines.append("No issues found.\n")
        return "\n".join(lines)
