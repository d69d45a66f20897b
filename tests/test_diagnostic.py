import json

import pytest

from convex_analyzer.diagnostic import Category, Diagnostic, Severity


def _make(**overrides):
    values = dict(
        rule="security/missing-arg-validators",
        severity=Severity.ERROR,
        category=Category.SECURITY,
        message="Public mutation without argument validators",
        help="Add `args: { ... }` with validators",
        file="convex/messages.ts",
        line=14,
        column=1,
    )
    values.update(overrides)
    return Diagnostic(**values)


def test_diagnostic_creation():
    d = _make()
    assert d.rule == "security/missing-arg-validators"
    assert d.severity == Severity.ERROR
    assert d.category == Category.SECURITY


@pytest.mark.parametrize(
    ("severity", "text"),
    [
        (Severity.ERROR, "error"),
        (Severity.WARNING, "warning"),
        (Severity.INFO, "info"),
    ],
)
def test_severity_display(severity, text):
    d = Diagnostic(
        rule="perf/unbounded-collect",
        severity=severity,
        category=Category.PERFORMANCE,
        message="msg",
        help="help",
        file="convex/messages.ts",
        line=1,
        column=1,
    )
    assert str(d.severity) == text
    assert f"{d.severity}" == text
    assert d.to_dict()["severity"] == text


@pytest.mark.parametrize(
    ("category", "weight"),
    [
        (Category.SECURITY, 1.5),
        (Category.PERFORMANCE, 1.2),
        (Category.CORRECTNESS, 1.5),
        (Category.SCHEMA, 1.0),
        (Category.ARCHITECTURE, 0.8),
        (Category.CONFIGURATION, 1.0),
        (Category.CLIENT_SIDE, 1.0),
    ],
)
def test_category_weight(category, weight):
    assert category.weight() == weight


@pytest.mark.parametrize(
    ("category", "text"),
    [
        (Category.SECURITY, "Security"),
        (Category.PERFORMANCE, "Performance"),
        (Category.CLIENT_SIDE, "Client-Side"),
    ],
)
def test_category_display(category, text):
    d = Diagnostic(
        rule="arch/no-convex-error",
        severity=Severity.INFO,
        category=category,
        message="msg",
        help="help",
        file="convex/messages.ts",
        line=1,
        column=1,
    )
    assert str(d.category) == text


def test_diagnostic_serialization():
    d = _make(
        rule="perf/unbounded-collect",
        category=Category.PERFORMANCE,
        message="Unbounded .collect()",
        help="Use .take(n) or pagination",
        line=22,
        column=10,
    )
    text = json.dumps(d.to_dict(), separators=(",", ":"))
    assert '"rule":"perf/unbounded-collect"' in text
    assert '"severity":"error"' in text


def test_client_side_category_serialized_by_variant_name():
    d = _make(category=Category.CLIENT_SIDE, severity=Severity.INFO)
    data = d.to_dict()
    assert data["category"] == "ClientSide"
    assert data["severity"] == "info"
    assert data["line"] == 14
    assert data["column"] == 1