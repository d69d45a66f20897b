import json
import subprocess

import pytest

from convex_analyzer.vcs import (
    GitError,
    generated_files_modified,
    get_changed_files,
    gitignore_contains,
    normalize_file_paths,
    read_node_version,
)


def _git(root, *args):
    subprocess.run(
        [
            "git",
            "-c",
            "user.email=tests@example.com",
            "-c",
            "user.name=Tests",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=root,
        check=True,
        capture_output=True,
    )


def _init_repo(root):
    _git(root, "init")
    _git(root, "add", ".")
    _git(root, "commit", "-m", "init")


@pytest.fixture
def repo(tmp_path):
    convex_dir = tmp_path / "convex"
    convex_dir.mkdir()
    (convex_dir / "messages.ts").write_text("export const a = 1;\n")
    _init_repo(tmp_path)
    return tmp_path


def test_get_changed_files_no_git(tmp_path):
    with pytest.raises(GitError):
        get_changed_files(tmp_path, "main")


def test_no_changes_yields_no_files(repo):
    assert get_changed_files(repo, "HEAD") == []


def test_untracked_files_are_included(repo):
    new_file = repo / "convex" / "new-message.ts"
    new_file.write_text("export const newMessage = 1;")
    assert get_changed_files(repo, "HEAD") == [new_file]


def test_modified_files_are_included(repo):
    tracked = repo / "convex" / "messages.ts"
    tracked.write_text("export const a = 2;\n")
    assert get_changed_files(repo, "HEAD") == [tracked]


def test_deleted_files_are_excluded(repo):
    (repo / "convex" / "messages.ts").unlink()
    assert get_changed_files(repo, "HEAD") == []


def test_unknown_base_raises(repo):
    with pytest.raises(GitError):
        get_changed_files(repo, "no-such-branch")


def test_gitignore_wildcard_is_respected(tmp_path):
    (tmp_path / ".gitignore").write_text(".env*\n")
    assert gitignore_contains(tmp_path, ".env.local") is True


def test_gitignore_exact_and_rooted_entries(tmp_path):
    (tmp_path / ".gitignore").write_text("# comment\nnode_modules\n/.env.local\n")
    assert gitignore_contains(tmp_path, ".env.local") is True


def test_gitignore_skips_comments_and_negations(tmp_path):
    (tmp_path / ".gitignore").write_text("# .env.local\n!.env.local\n\nnode_modules\n")
    assert gitignore_contains(tmp_path, ".env.local") is False


def test_gitignore_missing_file(tmp_path):
    assert gitignore_contains(tmp_path, ".env.local") is False


def test_normalize_file_paths_includes_relative_forms(tmp_path):
    target = tmp_path / "convex" / "a.ts"
    target.parent.mkdir()
    target.write_text("")
    forms = normalize_file_paths(target, tmp_path)
    assert "convex/a.ts" in forms
    assert "./convex/a.ts" in forms
    assert str(target).replace("\\", "/") in forms


def test_normalize_file_paths_missing_file_keeps_given_forms(tmp_path):
    target = tmp_path / "convex" / "gone.ts"
    forms = normalize_file_paths(target, tmp_path)
    assert forms == {
        str(target).replace("\\", "/"),
        "convex/gone.ts",
        "./convex/gone.ts",
    }


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ({"node": {"version": "18"}}, "18"),
        ({"nodeVersion": "20.1.0"}, "20.1.0"),
        ({"node": {}, "nodeVersion": "22"}, "22"),
        ({"node": {"version": 18}}, None),
        ({}, None),
    ],
)
def test_read_node_version(tmp_path, content, expected):
    (tmp_path / "convex.json").write_text(json.dumps(content))
    assert read_node_version(tmp_path) == expected


def test_read_node_version_missing_or_invalid(tmp_path):
    assert read_node_version(tmp_path) is None
    (tmp_path / "convex.json").write_text("{oops")
    assert read_node_version(tmp_path) is None


def test_generated_files_modified_outside_git(tmp_path):
    assert generated_files_modified(tmp_path) is False


def test_generated_files_modified_detects_changes(repo):
    assert generated_files_modified(repo) is False
    generated = repo / "convex" / "_generated"
    generated.mkdir()
    (generated / "api.d.ts").write_text("// generated")
    assert generated_files_modified(repo) is True