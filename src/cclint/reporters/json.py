"""JSON report writer."""

from __future__ import annotations

import json

from cclint.summary import LintSummary


class JsonReporter:
    """Serialises a summary as indented JSON with camelCase keys."""

    def report(self, summary: LintSummary) -> str:
        return json.dumps(summary.to_dict(), indent=2)
