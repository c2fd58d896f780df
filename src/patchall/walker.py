"""Depth-first enumeration of tracked roots."""

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Set

from patchall.errors import NotFoundError


@dataclass(frozen=True)
class TreeEntry:
    """A regular file or directory reached by walk_tree()."""
    path: Path
    stat: os.stat_result
    is_dir: bool


def walk_tree(root: Path, visit: Callable[[TreeEntry], None]) -> int:
    """
    Visit ROOT, then (for directories) each child depth-first.

    Sibling order is whatever os.scandir() yields. Symlinks are followed
    the way stat() follows them, but a directory whose real path was
    already entered is skipped so link cycles terminate. Entries that are
    neither regular files nor directories are ignored. Stat or listing
    failures below ROOT are reported and that subtree is skipped.

    Returns:
        Number of entries visited.

    Raises:
        NotFoundError: ROOT does not exist
    """
    root = Path(root)
    try:
        st = os.stat(root)
    except FileNotFoundError as e:
        raise NotFoundError(f"Path not found: {root}", path=root) from e

    visited_dirs: Set[str] = set()
    return _walk(root, st, visit, visited_dirs)


def _stat_or_warn(path: Path) -> Optional[os.stat_result]:
    try:
        return os.stat(path)
    except OSError as e:
        print(f"⚠️ Could not stat: {path} ({e})")
        return None


def _walk(path: Path, st: os.stat_result, visit, visited_dirs: Set[str]) -> int:
    if stat.S_ISREG(st.st_mode):
        visit(TreeEntry(path=path, stat=st, is_dir=False))
        return 1
    if not stat.S_ISDIR(st.st_mode):
        return 0

    real = os.path.realpath(path)
    if real in visited_dirs:
        print(f"⚠️ Skipping already visited directory (symlink cycle?): {path} -> {real}")
        return 0
    visited_dirs.add(real)

    visit(TreeEntry(path=path, stat=st, is_dir=True))
    count = 1

    print(f"📍 Scanning: {path}")
    try:
        with os.scandir(path) as it:
            children = [Path(entry.path) for entry in it]
    except OSError as e:
        print(f"⚠️ Could not list: {path} ({e})")
        return count

    for child in children:
        child_st = _stat_or_warn(child)
        if child_st is None:
            continue
        count += _walk(child, child_st, visit, visited_dirs)
    return count
