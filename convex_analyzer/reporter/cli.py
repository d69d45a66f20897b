"""Coloured terminal report."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from convex_analyzer.diagnostic import Diagnostic, Severity
from convex_analyzer.reporter.common import (
    VERSION,
    Reporter,
    count_by_severity,
    elapsed_seconds,
)

_FG_CODES = {"red": 31, "green": 32, "yellow": 33, "blue": 34, "cyan": 36}

_FACES = {
    "great": (
        "╭─────────╮",
        "│  ^   ^  │",
        "│    △    │",
        "│  ╰───╯  │",
        "╰─────────╯",
    ),
    "good": (
        "╭─────────╮",
        "│  ◦   ◦  │",
        "│    △    │",
        "│  ─────  │",
        "╰─────────╯",
    ),
    "fair": (
        "╭─────────╮",
        "│  •   •  │",
        "│    △    │",
        "│  ╭───╮  │",
        "╰─────────╯",
    ),
    "poor": (
        "╭─────────╮",
        "│  ×   ×  │",
        "│    △    │",
        "│  ╭───╮  │",
        "╰─────────╯",
    ),
}


def _fg(text: str, color: str) -> str:
    return f"\x1b[{_FG_CODES[color]}m{text}\x1b[39m"


def _bold(text: str) -> str:
    return f"\x1b[1m{text}\x1b[0m"


def _dim(text: str) -> str:
    return f"\x1b[2m{text}\x1b[0m"


def _score_color(score: int) -> str:
    score = min(score, 100)
    if score >= 85:
        return "green"
    if score >= 70:
        return "yellow"
    return "red"


def face_art(score: int) -> tuple[str, str, str, str, str]:
    """The five lines of the face drawn next to the score."""
    score = min(score, 100)
    if score >= 85:
        return _FACES["great"]
    if score >= 70:
        return _FACES["good"]
    if score >= 50:
        return _FACES["fair"]
    return _FACES["poor"]


def progress_bar(score: int, width: int) -> str:
    """A coloured bar of ``width`` cells, filled in proportion to the score."""
    score = min(score, 100)
    filled = (score * width) // 100
    bar = "█" * filled + "░" * (width - filled)
    return _fg(bar, _score_color(score))


def format_duration(seconds: float | timedelta) -> str:
    """Milliseconds below one second, otherwise seconds with one decimal."""
    secs = elapsed_seconds(seconds)
    if secs < 1.0:
        return f"{secs * 1000.0:.0f}ms"
    return f"{secs:.1f}s"


def _severity_icon(severity: Severity) -> str:
    match severity:
        case Severity.ERROR:
            return _bold(_fg("✖", "red"))
        case Severity.WARNING:
            return _fg("▲", "yellow")
        case _:
            return _fg("●", "blue")


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


class CliReporter(Reporter):
    """Human-readable report for a terminal."""

    def format(
        self,
        diagnostics: Sequence[Diagnostic],
        score: Any,
        project_name: str,
        verbose: bool,
        files_scanned: int,
        elapsed: float | timedelta,
    ) -> str:
        out: list[str] = [
            f"\n  {_bold('zed_convex')} v{VERSION} {_dim('─')} {_bold(project_name)}\n\n"
        ]

        normalized = min(score.value, 100)
        color = _score_color(normalized)
        score_text = _bold(_fg(str(normalized), color))
        label_text = _fg(str(score.label), color)
        bar = progress_bar(score.value, 34)
        side = {1: f"   {score_text} / 100", 2: f"   {label_text}", 3: f"   {bar}"}
        for index, line in enumerate(face_art(score.value)):
            out.append(f"     {line}{side.get(index, '')}\n")

        counts = count_by_severity(diagnostics)
        parts = []
        if counts.errors:
            parts.append(
                f"{_bold(_fg(str(counts.errors), 'red'))} "
                f"{_plural(counts.errors, 'error', 'errors')}"
            )
        if counts.warnings:
            parts.append(
                f"{_bold(_fg(str(counts.warnings), 'yellow'))} "
                f"{_plural(counts.warnings, 'warning', 'warnings')}"
            )
        if counts.infos:
            parts.append(
                f"{_fg(str(counts.infos), 'blue')} "
                f"{_plural(counts.infos, 'info', 'infos')}"
            )
        findings = ", ".join(parts) if parts else _bold(_fg("No issues found", "green"))
        out.append(
            f"\n  {findings} across {_bold(str(files_scanned))} files in "
            f"{_dim(format_duration(elapsed))}\n"
        )

        if not diagnostics:
            out.append("\n")
            return "".join(out)

        by_category: defaultdict[str, defaultdict[str, list[Diagnostic]]] = defaultdict(
            lambda: defaultdict(list)
        )
        for diagnostic in diagnostics:
            by_category[str(diagnostic.category)][diagnostic.rule].append(diagnostic)

        for category in sorted(by_category):
            rules = by_category[category]
            pad_len = max(0, 54 - (len(category) + 2))
            out.append(f"\n  {_dim('──')} {_bold(category)} {_dim('─' * pad_len)}\n")

            for rule in sorted(rules):
                occurrences = rules[rule]
                first = occurrences[0]
                count_str = f" {_dim(f'({len(occurrences)})')}" if len(occurrences) > 1 else ""
                out.append(f"   {_severity_icon(first.severity)} {first.message}{count_str}\n")
                out.append(f"     {_dim(rule)}\n")
                out.append(f"     {_fg('Help:', 'cyan')} {first.help}\n")
                if verbose:
                    out.extend(
                        f"      {_dim('→')} {_dim(d.file)}:{d.line}:{d.column}\n"
                        for d in occurrences
                    )

        out.append("\n")
        return "".join(out)