"""Shared pieces of the report formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from convex_analyzer.diagnostic import Diagnostic, Severity

VERSION = "1.1.0"


@dataclass(frozen=True)
class SeverityCounts:
    """Number of diagnostics at each severity."""

    errors: int = 0
    warnings: int = 0
    infos: int = 0


def count_by_severity(diagnostics: Iterable[Diagnostic]) -> SeverityCounts:
    """Count diagnostics per severity."""
    errors = warnings = infos = 0
    for diagnostic in diagnostics:
        match diagnostic.severity:
            case Severity.ERROR:
                errors += 1
            case Severity.WARNING:
                warnings += 1
            case Severity.INFO:
                infos += 1
    return SeverityCounts(errors=errors, warnings=warnings, infos=infos)


def score_only(score: Any) -> str:
    """The bare score value followed by a newline."""
    return f"{score.value}\n"


def elapsed_seconds(elapsed: float | timedelta) -> float:
    """Normalise an elapsed time to seconds."""
    if isinstance(elapsed, timedelta):
        return elapsed.total_seconds()
    return float(elapsed)


class Reporter(ABC):
    """Turns analysis results into printable text."""

    @abstractmethod
    def format(
        self,
        diagnostics: Sequence[Diagnostic],
        score: Any,
        project_name: str,
        verbose: bool,
        files_scanned: int,
        elapsed: float | timedelta,
    ) -> str:
        """Render the report; ``score`` has ``value`` and ``label``."""