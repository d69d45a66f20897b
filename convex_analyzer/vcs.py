"""Project facts gathered from git and from files in the project root."""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from pathlib import Path, PurePath

from convex_analyzer.config import _compile_glob


class GitError(Exception):
    """Raised when a git command cannot be run or fails."""


def get_changed_files(root: str | Path, base: str) -> list[Path]:
    """Files changed against ``base`` plus untracked files, under ``root``."""
    root = Path(root)
    changed = {
        root / p
        for p in _git_paths(root, ["diff", "--name-only", "--diff-filter=ACMRTUXB", base])
    }
    changed.update(
        root / p for p in _git_paths(root, ["ls-files", "--others", "--exclude-standard"])
    )
    return sorted(changed)


def _git_paths(root: Path, args: Sequence[str]) -> list[str]:
    try:
        output = subprocess.run(
            ["git", *args], cwd=root, capture_output=True, check=False
        )
    except OSError as exc:
        raise GitError(f"failed to run git {list(args)!r}: {exc}") from exc

    if output.returncode != 0:
        message = output.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(message or f"git command exited with status {output.returncode}")

    lines = output.stdout.decode("utf-8", errors="replace").splitlines()
    return [stripped for line in lines if (stripped := line.strip())]


def gitignore_contains(root: str | Path, pattern: str) -> bool:
    """Whether the root ``.gitignore`` has a line covering ``pattern``."""
    basename = PurePath(pattern).name or pattern
    try:
        contents = (Path(root) / ".gitignore").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False

    for line in contents.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(("#", "!")):
            continue
        candidate = trimmed.lstrip("/")
        if candidate in (pattern, basename):
            return True
        try:
            glob = _compile_glob(candidate)
        except ValueError:
            continue
        if glob.fullmatch(pattern) or glob.fullmatch(basename):
            return True
    return False


def normalize_file_paths(path: str | Path, project_root: str | Path) -> set[str]:
    """Spellings of ``path`` that git output might use, with ``/`` separators."""
    path = Path(path)
    project_root = Path(project_root)

    def normalized(p: PurePath) -> str:
        return str(p).replace("\\", "/")

    try:
        canonical: Path | None = path.resolve(strict=True)
    except (OSError, RuntimeError):
        canonical = None

    forms = {normalized(path)}
    candidates = [path]
    if canonical is not None:
        forms.add(normalized(canonical))
        candidates.append(canonical)

    for candidate in candidates:
        try:
            relative = candidate.relative_to(project_root)
        except ValueError:
            continue
        if relative.parts:
            text = normalized(relative)
            forms.add(text)
            forms.add(f"./{text}")
    return forms


def read_node_version(root: str | Path) -> str | None:
    """The Node version configured in ``convex.json``, if any."""
    try:
        data = json.loads((Path(root) / "convex.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None

    node = data.get("node")
    value = node.get("version") if isinstance(node, dict) else None
    if value is None:
        value = data.get("nodeVersion")
    return value if isinstance(value, str) else None


def generated_files_modified(root: str | Path) -> bool:
    """Whether git reports local changes under ``convex/_generated``."""
    try:
        output = subprocess.run(
            ["git", "status", "--porcelain", "convex/_generated"],
            cwd=Path(root),
            capture_output=True,
            check=False,
        )
    except OSError:
        return False
    return bool(output.stdout)