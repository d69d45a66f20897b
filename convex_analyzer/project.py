"""Detection of a Convex project and discovery of its source files."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from convex_analyzer.config import Config

SCHEMA_FILENAMES = (
    "schema.ts",
    "schema.js",
    "schema.mts",
    "schema.cts",
    "schema.mjs",
    "schema.cjs",
)

_SUPPORTED_EXTENSIONS = frozenset({"ts", "tsx", "js", "jsx", "mts", "cts", "mjs", "cjs"})


class ProjectError(Exception):
    """Raised when a directory is not a Convex project."""


def is_supported_source_file(ext: str) -> bool:
    """Whether a file extension (with or without the dot) is analysable."""
    return ext.removeprefix(".") in _SUPPORTED_EXTENSIONS


@dataclass
class ProjectInfo:
    """Facts about a Convex project on disk."""

    root: Path
    convex_dir: Path
    has_schema: bool
    has_auth_config: bool
    has_convex_json: bool
    convex_version: str | None
    framework: str | None

    @classmethod
    def detect(cls, root: str | Path) -> ProjectInfo:
        """Inspect ``root``; raise ProjectError if it has no ``convex/`` dir."""
        root = Path(root)
        convex_dir = root / "convex"
        if not convex_dir.is_dir():
            raise ProjectError(f"No convex/ directory found in {root}")

        convex_version, framework = _parse_package_json(root)
        return cls(
            root=root,
            convex_dir=convex_dir,
            has_schema=any((convex_dir / name).exists() for name in SCHEMA_FILENAMES),
            has_auth_config=(convex_dir / "auth.config.ts").exists()
            or (convex_dir / "auth.config.js").exists(),
            has_convex_json=(root / "convex.json").exists(),
            convex_version=convex_version,
            framework=framework,
        )

    def discover_files(self, config: Config) -> list[Path]:
        """All analysable source files under ``convex/``, sorted."""
        files = _walk(self.root, self.convex_dir, config)
        return sorted(files, key=lambda p: p.parts)


def _walk(project_root: Path, directory: Path, config: Config) -> Iterator[Path]:
    try:
        entries = list(directory.iterdir())
    except OSError:
        return
    for path in entries:
        if path.is_dir():
            if path.name == "_generated":
                continue
            yield from _walk(project_root, path, config)
        elif (
            path.suffix
            and is_supported_source_file(path.suffix)
            and not config.is_file_ignored(project_root, path)
        ):
            yield path


def _parse_package_json(root: Path) -> tuple[str | None, str | None]:
    try:
        data = json.loads((root / "package.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None, None
    if not isinstance(data, Mapping):
        return None, None

    deps = _object(data.get("dependencies"))
    dev_deps = _object(data.get("devDependencies"))

    if deps is not None and "convex" in deps:
        version_value: Any = deps["convex"]
    elif dev_deps is not None:
        version_value = dev_deps.get("convex")
    else:
        version_value = None
    convex_version = version_value if isinstance(version_value, str) else None

    def has_dep(name: str) -> bool:
        return any(d is not None and name in d for d in (deps, dev_deps))

    if has_dep("next"):
        framework = "nextjs"
    elif has_dep("vite"):
        framework = "vite"
    elif has_dep("@remix-run/node"):
        framework = "remix"
    else:
        framework = None
    return convex_version, framework


def _object(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None