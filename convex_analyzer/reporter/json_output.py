"""Machine-readable JSON report."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from convex_analyzer.diagnostic import Diagnostic
from convex_analyzer.reporter.common import VERSION, Reporter, count_by_severity


class JsonReporter(Reporter):
    """Pretty-printed JSON with score, summary and all diagnostics."""

    def format(
        self,
        diagnostics: Sequence[Diagnostic],
        score: Any,
        project_name: str,
        verbose: bool,
        files_scanned: int,
        elapsed: float | timedelta,
    ) -> str:
        counts = count_by_severity(diagnostics)
        summary = {
            "errors": counts.errors,
            "warnings": counts.warnings,
            "infos": counts.infos,
            "files_scanned": files_scanned,
        }
        score_json = {"value": score.value, "label": str(score.label)}
        try:
            return json.dumps(
                {
                    "version": VERSION,
                    "score": score_json,
                    "summary": summary,
                    "diagnostics": [d.to_dict() for d in diagnostics],
                },
                indent=2,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            fallback = {
                "version": VERSION,
                "error": "serialization_failed",
                "message": str(exc),
                "score": score_json,
                "summary": summary,
                "diagnostics": [],
            }
            try:
                return json.dumps(fallback, indent=2, ensure_ascii=False)
            except (TypeError, ValueError):
                return "{}"