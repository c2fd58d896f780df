# src/patchall/config.py

import os
from dataclasses import dataclass
from pathlib import Path

ROOT_ENV_VAR = "PATCHALL_ROOT"

FILES_DIR_NAME = "files"
MANIFEST_CONFIG_NAME = "manifest.cfg"
MANIFEST_NAME = "manifest"
BACKUP_DIR_NAME = "backup"
SESSION_DIR_NAME = ".patchall"


def platform_supports_ownership() -> bool:
    """True when this platform exposes POSIX owner/group ids."""
    return hasattr(os, "chown") and hasattr(os, "getuid")


def find_patch_root(root=None) -> Path:
    """
    Return the patch root directory.
    Order: explicit argument, $PATCHALL_ROOT, current working directory.
    """
    if root:
        return Path(root).resolve()
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(os.path.expanduser(env_root)).resolve()
    return Path.cwd().resolve()


@dataclass(frozen=True)
class PatchConfig:
    """Locations and platform capabilities shared by every phase."""
    root: Path
    files_dir: Path
    manifest_config: Path
    manifest: Path
    backup_dir: Path
    session_dir: Path
    supports_ownership: bool = True

    @classmethod
    def from_root(cls, root=None, supports_ownership: bool | None = None) -> "PatchConfig":
        base = find_patch_root(root)
        if supports_ownership is None:
            supports_ownership = platform_supports_ownership()
        return cls(
            root=base,
            files_dir=base / FILES_DIR_NAME,
            manifest_config=base / MANIFEST_CONFIG_NAME,
            manifest=base / MANIFEST_NAME,
            backup_dir=base / BACKUP_DIR_NAME,
            session_dir=base / SESSION_DIR_NAME,
            supports_ownership=supports_ownership,
        )
