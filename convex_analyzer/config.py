"""Project configuration loaded from ``convex-doctor.toml``."""

from __future__ import annotations

import dataclasses
import functools
import re
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePath
from typing import Any

from convex_analyzer.diagnostic import Diagnostic, Severity

CONFIG_FILE_NAME = "convex-doctor.toml"
DEFAULT_IGNORE_FILES = ("convex/_generated/**",)
DEFAULT_GUIDANCE_VERSION = "v0.241.0"

_SUPPRESSED_WARNING_RULES = frozenset(
    {
        "security/missing-auth-check",
        "security/missing-return-validators",
        "perf/sequential-run-calls",
        "perf/helper-vs-run",
        "perf/action-from-client",
        "correctness/missing-unique",
        "correctness/replace-vs-patch",
        "schema/index-name-includes-fields",
        "schema/optional-field-no-default-handling",
        "schema/missing-search-index-filter",
        "arch/large-handler",
        "arch/monolithic-file",
        "arch/duplicated-auth",
        "arch/deep-function-chain",
        "client/unhandled-loading-state",
        "client/action-instead-of-mutation",
        "client/missing-convex-provider",
    }
)


class ConfigError(Exception):
    """Raised when the configuration cannot be read or parsed."""


class StrictnessMode(Enum):
    """How diagnostics are filtered or promoted before scoring."""

    TIERED = "tiered"
    STRICT = "strict"
    LOW_NOISE = "low_noise"


@dataclass
class IgnoreConfig:
    files: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_FILES))


@dataclass
class CiConfig:
    fail_below: int = 0


@dataclass
class ConvexConfig:
    guidance_version: str = DEFAULT_GUIDANCE_VERSION
    strictness: StrictnessMode = StrictnessMode.TIERED


@dataclass
class Config:
    """Rule toggles, ignore patterns, CI threshold and strictness."""

    rules: dict[str, str] = field(default_factory=dict)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    ci: CiConfig = field(default_factory=CiConfig)
    convex: ConvexConfig = field(default_factory=ConvexConfig)

    @classmethod
    def load(cls, project_root: str | Path) -> Config:
        """Load the config from the project root, or defaults if absent."""
        config_path = Path(project_root) / CONFIG_FILE_NAME
        if not config_path.exists():
            return cls()
        try:
            contents = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config: {exc}") from exc
        try:
            data = tomllib.loads(contents)
            return cls.from_dict(data)
        except (tomllib.TOMLDecodeError, ConfigError) as exc:
            raise ConfigError(f"Failed to parse config: {exc}") from exc

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a config from a parsed TOML document."""
        if not isinstance(data, Mapping):
            raise ConfigError("configuration must be a table")

        rules = _table(data, "rules")
        for rule_id, value in rules.items():
            if not isinstance(value, str):
                raise ConfigError(f"rules.{rule_id}: expected a string")

        ignore = _table(data, "ignore")
        files = ignore.get("files", list(DEFAULT_IGNORE_FILES))
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ConfigError("ignore.files: expected a list of strings")

        ci = _table(data, "ci")
        fail_below = ci.get("fail_below", 0)
        if (
            isinstance(fail_below, bool)
            or not isinstance(fail_below, int)
            or not 0 <= fail_below < 2**32
        ):
            raise ConfigError("ci.fail_below: expected a non-negative integer")

        convex = _table(data, "convex")
        guidance_version = convex.get("guidance_version", DEFAULT_GUIDANCE_VERSION)
        if not isinstance(guidance_version, str):
            raise ConfigError("convex.guidance_version: expected a string")
        strictness_value = convex.get("strictness", StrictnessMode.TIERED.value)
        try:
            strictness = StrictnessMode(strictness_value)
        except ValueError as exc:
            choices = ", ".join(m.value for m in StrictnessMode)
            raise ConfigError(
                f"convex.strictness: unknown variant {strictness_value!r}, expected one of {choices}"
            ) from exc

        return cls(
            rules=dict(rules),
            ignore=IgnoreConfig(files=list(files)),
            ci=CiConfig(fail_below=fail_below),
            convex=ConvexConfig(guidance_version=guidance_version, strictness=strictness),
        )

    def is_rule_enabled(self, rule_id: str) -> bool:
        """A rule is enabled unless it is explicitly set to ``off``."""
        return self.rules.get(rule_id) != "off"

    def is_file_ignored(self, project_root: str | PurePath, file_path: str | PurePath) -> bool:
        """Whether the file matches any of the configured ignore patterns."""
        path = PurePath(file_path)
        absolute = str(path).replace("\\", "/")
        try:
            relative = str(path.relative_to(project_root)).replace("\\", "/")
        except ValueError:
            relative = absolute
        relative_with_dot = f"./{relative}"
        file_name = path.name

        candidates = (relative, relative_with_dot, absolute)
        for pattern in _ignore_patterns(tuple(self.ignore.files)):
            if any(pattern.fullmatch(candidate) for candidate in candidates):
                return True

        if file_name:
            for raw in self.ignore.files:
                normalized = raw.replace("\\", "/").strip()
                if "/" in normalized:
                    continue
                try:
                    basename_glob = _compile_glob(normalized)
                except ValueError:
                    continue
                if basename_glob.fullmatch(file_name):
                    return True
        return False

    def apply_strictness(self, diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
        """Return the diagnostics adjusted for the configured strictness."""
        match self.convex.strictness:
            case StrictnessMode.STRICT:
                return [
                    dataclasses.replace(d, severity=Severity.WARNING)
                    if d.severity == Severity.INFO
                    else d
                    for d in diagnostics
                ]
            case StrictnessMode.LOW_NOISE:
                return [
                    d
                    for d in diagnostics
                    if d.severity != Severity.INFO
                    and not (
                        d.severity == Severity.WARNING
                        and d.rule in _SUPPRESSED_WARNING_RULES
                    )
                ]
            case _:
                return list(diagnostics)


def _table(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"{key}: expected a table")
    return section


@functools.lru_cache(maxsize=None)
def _ignore_patterns(files: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    patterns = []
    for raw in files:
        for candidate in _glob_candidates(raw):
            try:
                patterns.append(_compile_glob(candidate))
            except ValueError:
                continue
    return tuple(patterns)


def _glob_candidates(pattern: str) -> list[str]:
    normalized = pattern.replace("\\", "/").strip()
    if not normalized:
        return []

    candidates: list[str] = []

    def push(candidate: str) -> None:
        if candidate and candidate not in candidates:
            candidates.append(candidate)

    push(normalized)
    if normalized.startswith("./"):
        push(re.sub(r"^(?:\./)+", "", normalized))
    if normalized.startswith("/"):
        push(normalized.lstrip("/"))
    ends_with_slash = normalized.endswith("/")
    if ends_with_slash:
        trimmed = normalized.rstrip("/")
        if trimmed:
            push(trimmed)
            push(f"{trimmed}/**")

    has_glob_meta = any(ch in normalized for ch in "*?[]")
    has_slash = "/" in normalized
    if not ends_with_slash and has_slash and not has_glob_meta:
        push(f"{normalized}/**")
    if not ends_with_slash and not has_slash and not has_glob_meta:
        push(f"**/{normalized}/**")
    if not has_slash:
        push(f"**/{normalized}")
    return candidates


@functools.lru_cache(maxsize=1024)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern; raise ValueError if it is malformed.

    ``*`` and ``?`` cross path separators, ``**`` must be a whole path
    component, and ``[...]``/``[!...]`` are character classes.
    """
    parts: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            end = i
            while end < n and pattern[end] == "*":
                end += 1
            count = end - i
            if count == 1:
                parts.append(".*")
                i = end
                continue
            if count > 2:
                raise ValueError("wildcards are either regular `*` or recursive `**`")
            if i > 0 and pattern[i - 1] != "/":
                raise ValueError("recursive wildcards must form a single path component")
            if end < n:
                if pattern[end] != "/":
                    raise ValueError("recursive wildcards must form a single path component")
                parts.append("(?:.*/)?")
                i = end + 1
            else:
                parts.append(".*")
                i = end
        elif char == "?":
            parts.append(".")
            i += 1
        elif char == "[":
            if i + 4 <= n and pattern[i + 1] == "!":
                close = pattern.find("]", i + 3)
                if close < 0:
                    raise ValueError("invalid range pattern")
                parts.append(_char_class(pattern[i + 2 : close], negate=True))
                i = close + 1
            elif i + 3 <= n and pattern[i + 1] != "!":
                close = pattern.find("]", i + 2)
                if close < 0:
                    raise ValueError("invalid range pattern")
                parts.append(_char_class(pattern[i + 1 : close], negate=False))
                i = close + 1
            else:
                raise ValueError("invalid range pattern")
        else:
            parts.append(re.escape(char))
            i += 1
    return re.compile("".join(parts), re.DOTALL)


def _char_class(spec: str, *, negate: bool) -> str:
    items: list[str] = []
    i = 0
    while i < len(spec):
        if i + 3 <= len(spec) and spec[i + 1] == "-":
            low, high = spec[i], spec[i + 2]
            if low <= high:
                items.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 3
        else:
            items.append(re.escape(spec[i]))
            i += 1
    if not items:
        return "." if negate else "(?!)"
    return f"[{'^' if negate else ''}{''.join(items)}]"