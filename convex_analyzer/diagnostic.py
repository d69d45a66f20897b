"""Diagnostics produced by analysis rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any


class Severity(StrEnum):
    """How serious a finding is."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(Enum):
    """The area of a project a finding belongs to."""

    SECURITY = "Security"
    PERFORMANCE = "Performance"
    CORRECTNESS = "Correctness"
    SCHEMA = "Schema"
    ARCHITECTURE = "Architecture"
    CONFIGURATION = "Configuration"
    CLIENT_SIDE = "ClientSide"

    def weight(self) -> float:
        """Scoring weight of findings in this category."""
        return _WEIGHTS[self]

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_WEIGHTS = {
    Category.SECURITY: 1.5,
    Category.PERFORMANCE: 1.2,
    Category.CORRECTNESS: 1.5,
    Category.SCHEMA: 1.0,
    Category.ARCHITECTURE: 0.8,
    Category.CONFIGURATION: 1.0,
    Category.CLIENT_SIDE: 1.0,
}

_DISPLAY_NAMES = {
    Category.SECURITY: "Security",
    Category.PERFORMANCE: "Performance",
    Category.CORRECTNESS: "Correctness",
    Category.SCHEMA: "Schema",
    Category.ARCHITECTURE: "Architecture",
    Category.CONFIGURATION: "Configuration",
    Category.CLIENT_SIDE: "Client-Side",
}


@dataclass
class Diagnostic:
    """A single finding reported by a rule."""

    rule: str
    severity: Severity
    category: Category
    message: str
    help: str
    file: str
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this diagnostic."""
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "help": self.help,
            "file": self.file,
            "line": self.line,
            "column": self.column,
        }