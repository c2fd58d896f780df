"""
Tests for depth-first tree walking.
"""

import os
from pathlib import Path

import pytest

from patchall.errors import NotFoundError
from patchall.walker import walk_tree


def _collect(root):
    seen = []
    walk_tree(root, seen.append)
    return seen


def test_walk_single_file(tmp_path):
    f = tmp_path / "app.conf"
    f.write_text("x")
    entries = _collect(f)
    assert len(entries) == 1
    assert entries[0].path == f
    assert entries[0].is_dir is False


def test_walk_nested_tree_parents_first(tmp_path):
    root = tmp_path / "root"
    (root / "a" / "b").mkdir(parents=True)
    (root / "top.txt").write_text("1")
    (root / "a" / "mid.txt").write_text("2")
    (root / "a" / "b" / "deep.txt").write_text("3")

    entries = _collect(root)
    paths = [e.path for e in entries]

    assert set(paths) == {
        root,
        root / "top.txt",
        root / "a",
        root / "a" / "mid.txt",
        root / "a" / "b",
        root / "a" / "b" / "deep.txt",
    }
    assert paths[0] == root
    assert paths.index(root / "a") < paths.index(root / "a" / "mid.txt")
    assert paths.index(root / "a" / "b") < paths.index(root / "a" / "b" / "deep.txt")
    assert {e.path for e in entries if e.is_dir} == {root, root / "a", root / "a" / "b"}


def test_walk_returns_visit_count(tmp_path):
    (tmp_path / "x").write_text("x")
    (tmp_path / "y").mkdir()
    assert walk_tree(tmp_path, lambda entry: None) == 3


def test_walk_missing_root_raises(tmp_path):
    with pytest.raises(NotFoundError):
        walk_tree(tmp_path / "missing", lambda entry: None)
    with pytest.raises(FileNotFoundError):
        walk_tree(tmp_path / "missing", lambda entry: None)


def test_walk_survives_symlink_cycle(tmp_path):
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "sub" / "file.txt").write_text("data")
    os.symlink(root, root / "sub" / "loop")

    entries = _collect(root)
    files = [e.path for e in entries if not e.is_dir]
    assert files == [root / "sub" / "file.txt"]


def test_walk_skips_broken_symlink(tmp_path, capsys):
    root = tmp_path / "root"
    root.mkdir()
    (root / "ok.txt").write_text("ok")
    os.symlink(root / "gone", root / "dangling")

    entries = _collect(root)
    assert {e.path for e in entries} == {root, root / "ok.txt"}
    assert "Could not stat" in capsys.readouterr().out
