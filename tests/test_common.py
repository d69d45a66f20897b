from dataclasses import dataclass
from datetime import timedelta

import pytest

from convex_analyzer.diagnostic import Category, Diagnostic, Severity
from convex_analyzer.reporter.common import (
    Reporter,
    SeverityCounts,
    count_by_severity,
    elapsed_seconds,
    score_only,
)


@dataclass
class Score:
    value: int
    label: str


def make(severity: Severity, rule: str = "arch/large-handler") -> Diagnostic:
    return Diagnostic(
        rule=rule,
        severity=severity,
        category=Category.ARCHITECTURE,
        message="msg",
        help="help",
        file="convex/messages.ts",
        line=1,
        column=1,
    )


def test_score_only_is_value_and_newline():
    assert score_only(Score(value=73, label="Needs work")) == "73\n"


def test_score_only_zero():
    assert score_only(Score(value=0, label="Critical")).strip() == "0"


def test_count_by_severity_empty():
    assert count_by_severity([]) == SeverityCounts(0, 0, 0)


def test_count_by_severity_mixed():
    diagnostics = [
        make(Severity.ERROR),
        make(Severity.WARNING),
        make(Severity.WARNING),
        make(Severity.INFO),
        make(Severity.ERROR),
    ]
    counts = count_by_severity(diagnostics)
    assert counts.errors == 2
    assert counts.warnings == 2
    assert counts.infos == 1
    assert counts.errors + counts.warnings + counts.infos == len(diagnostics)


def test_count_accepts_generator():
    counts = count_by_severity(make(Severity.INFO) for _ in range(3))
    assert counts.infos == 3


def test_elapsed_seconds_from_timedelta_and_float():
    assert elapsed_seconds(timedelta(milliseconds=1500)) == pytest.approx(1.5)
    assert elapsed_seconds(2) == 2.0


def test_reporter_is_abstract():
    with pytest.raises(TypeError):
        Reporter()