"""Report writers for lint summaries."""

from __future__ import annotations

from cclint.reporters.console import ConsoleReporter
from cclint.reporters.json import JsonReporter
from cclint.reporters.markdown import MarkdownReporter

__all__ = [
    "ConsoleReporter",
    "JsonReporter",
    "MarkdownReporter",
]
