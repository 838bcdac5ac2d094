import os

import pytest

from editforge.commit.core import Change, commit_changes, resolve_within
from editforge.errors.path import PathViolation


def test_commit_changes_invalid_mode_raises_value_error(tmp_path):
    with pytest.raises(ValueError):
        commit_changes(str(tmp_path), [], mode="not-a-mode")


def test_resolve_within_rejects_traversal(tmp_path):
    base = os.path.realpath(str(tmp_path))
    with pytest.raises(PathViolation):
        resolve_within(base, "../escape.txt")
    assert resolve_within(base, "a/b.txt") == os.path.join(base, "a", "b.txt")


def test_create_and_modify_non_atomic(tmp_path):
    (tmp_path / "exists.txt").write_text("old", encoding="utf-8")
    summary = commit_changes(
        str(tmp_path),
        [
            Change(action="create", path="new/dir/file.txt", new_content="hello"),
            Change(action="modify", path="exists.txt", new_content="new", original_content="old"),
        ],
    )
    assert summary.ok
    assert summary.success == ["new/dir/file.txt", "exists.txt"]
    assert (tmp_path / "new" / "dir" / "file.txt").read_text(encoding="utf-8") == "hello"
    assert (tmp_path / "exists.txt").read_text(encoding="utf-8") == "new"


def test_modify_missing_file_is_reported(tmp_path):
    summary = commit_changes(str(tmp_path), [Change(action="modify", path="nope.txt", new_content="x")])
    assert summary.failed == ["nope.txt"]
    assert "nope.txt" in summary.errors


def test_unsupported_action_is_reported(tmp_path):
    summary = commit_changes(str(tmp_path), [Change(action="delete", path="a.txt")])
    assert summary.failed == ["a.txt"]
    assert "Unsupported action" in summary.errors["a.txt"]


def test_traversal_is_reported_not_raised(tmp_path):
    summary = commit_changes(str(tmp_path), [Change(action="create", path="../x.txt", new_content="x")])
    assert summary.failed == ["../x.txt"]
    assert "Path traversal" in summary.errors["../x.txt"]


def test_fail_fast_stops_at_first_validation_error(tmp_path):
    summary = commit_changes(
        str(tmp_path),
        [
            Change(action="modify", path="missing.txt", new_content="x"),
            Change(action="create", path="ok.txt", new_content="x"),
        ],
        mode="fail_fast",
    )
    assert summary.failed == ["missing.txt"]
    assert not (tmp_path / "ok.txt").exists()


def test_dry_run_writes_nothing(tmp_path):
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    summary = commit_changes(
        str(tmp_path),
        [Change(action="modify", path="a.txt", new_content="bbb")],
        dry_run=True,
    )
    assert summary.dry_run
    assert summary.success == ["DRY RUN: Would modify file a.txt (3 bytes)"]
    assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "a"


def test_dry_run_permission_denied(tmp_path, monkeypatch):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "f.txt").write_text("x", encoding="utf-8")
    real_access = os.access

    def fake_access(path, mode):
        if os.path.samefile(path, sub):
            return False
        return real_access(path, mode)

    monkeypatch.setattr(os, "access", fake_access)
    summary = commit_changes(
        str(tmp_path), [Change(action="modify", path="sub/f.txt", new_content="y")], dry_run=True
    )
    assert summary.failed == ["sub/f.txt"]
    assert "No write permission for directory" in summary.errors["sub/f.txt"]


def test_atomic_write_with_backup(tmp_path):
    target = tmp_path / "code.py"
    target.write_text("print('a')\n", encoding="utf-8")
    summary = commit_changes(
        str(tmp_path),
        [Change(action="modify", path="code.py", new_content="print('b')\n")],
        atomic=True,
        backup_ext="bak",
    )
    assert summary.ok
    assert target.read_text(encoding="utf-8") == "print('b')\n"
    assert (tmp_path / "code.py.bak").read_text(encoding="utf-8") == "print('a')\n"
    # no staging files left behind
    assert not [p for p in os.listdir(tmp_path) if p.startswith(".ef-")]


def test_atomic_preserves_crlf(tmp_path):
    commit_changes(
        str(tmp_path),
        [Change(action="create", path="win.txt", new_content="a\r\nb\r\n")],
        atomic=True,
    )
    assert (tmp_path / "win.txt").read_bytes() == b"a\r\nb\r\n"


def test_atomic_fail_fast_rolls_back_promoted_files(tmp_path, monkeypatch):
    (tmp_path / "one.txt").write_text("one", encoding="utf-8")
    (tmp_path / "two.txt").write_text("two", encoding="utf-8")

    from editforge.commit import core as ccore

    real_replace = os.replace
    calls = {"n": 0}

    def flaky_replace(src, dst):
        calls["n"] += 1
        if calls["n"] == 2:
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(ccore.os, "replace", flaky_replace)
    summary = commit_changes(
        str(tmp_path),
        [
            Change(action="modify", path="one.txt", new_content="ONE", original_content="one"),
            Change(action="modify", path="two.txt", new_content="TWO", original_content="two"),
        ],
        mode="fail_fast",
        atomic=True,
    )
    assert summary.failed == ["two.txt"]
    assert summary.success == []
    assert (tmp_path / "one.txt").read_text(encoding="utf-8") == "one"
    assert (tmp_path / "two.txt").read_text(encoding="utf-8") == "two"
    assert not [p for p in os.listdir(tmp_path) if p.startswith(".ef-")]


def test_symlink_out_of_base_is_reported(tmp_path, tmp_path_factory):
    base = tmp_path / "base"
    base.mkdir()
    outside = tmp_path_factory.mktemp("outside")
    os.symlink(str(outside), str(base / "link"))
    summary = commit_changes(str(base), [Change(action="create", path="link/x.txt", new_content="x")])
    assert summary.failed == ["link/x.txt"]
    assert "Path traversal" in summary.errors["link/x.txt"]
    assert not (outside / "x.txt").exists()
