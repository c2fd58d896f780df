"""
vault.py — Mirrored copies of live files keyed by their absolute path.

The same layout serves two roots: the package (files/) written during
build, and the backup area written lazily during patch.
"""

import os
import shutil
import stat
from pathlib import Path

from patchall.pathing import mirror_path


class BackupVault:
    """Copies live paths under `root`, preserving their absolute location as a subpath."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def entry_path(self, live_path) -> Path:
        return mirror_path(self.root, live_path)

    def has_entry(self, live_path) -> bool:
        """True when a file copy of LIVE_PATH is stored in the vault."""
        return self.entry_path(live_path).is_file()

    def clear(self) -> None:
        if self.root.exists():
            shutil.rmtree(self.root)

    def backup(self, live_path) -> bool:
        """
        Copy LIVE_PATH into the vault.

        Directories are copied with their whole subtree. For a regular file
        the missing parent directories are created first, taking the live
        parent's permission bits plus owner rwx so that later copies into the
        same mirror directory still succeed. Then the content is copied.

        Returns:
            False if LIVE_PATH cannot be stat'd or copied, True otherwise.
        """
        live_path = Path(live_path)
        try:
            st = os.stat(live_path)
        except OSError as e:
            print(f"⚠️ Could not back up: {live_path} ({e})")
            return False

        dest = self.entry_path(live_path)
        try:
            if stat.S_ISDIR(st.st_mode):
                print(f"🗂️  Copying directory {live_path} -> {dest}")
                shutil.copytree(live_path, dest, dirs_exist_ok=True)
            elif stat.S_ISREG(st.st_mode):
                self._ensure_parents(live_path, dest)
                shutil.copy2(live_path, dest)
            else:
                print(f"⚠️ Not a file or directory, not copied: {live_path}")
                return False
        except OSError as e:
            print(f"⚠️ Could not copy {live_path} -> {dest} ({e})")
            return False
        return True

    def ensure_dir(self, live_path) -> Path:
        """Create the mirror directory for LIVE_PATH (no content, no metadata files)."""
        dest = self.entry_path(live_path)
        dest.mkdir(parents=True, exist_ok=True)
        return dest

    @staticmethod
    def _ensure_parents(live_path: Path, dest: Path) -> None:
        if dest.parent.is_dir():
            return
        try:
            parent_mode = os.stat(live_path.parent).st_mode & 0o777
        except OSError:
            parent_mode = 0o777
        dest.parent.mkdir(parents=True, exist_ok=True)
        os.chmod(dest.parent, parent_mode | 0o700)
