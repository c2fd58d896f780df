"""
Ownership and permission metadata for tracked paths.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from patchall.errors import PermissionApplyError

if TYPE_CHECKING:
    from patchall.manifest import ManifestRecord


def collect_metadata(path: Path, supports_ownership: bool, st: os.stat_result | None = None) -> dict:
    """
    Return {owner_id, group_id, permission_bits} for PATH.

    On platforms without POSIX ownership the result is an empty dict, and the
    manifest record for PATH carries no metadata fields.
    """
    if not supports_ownership:
        return {}
    if st is None:
        st = os.stat(path)
    return {
        "owner_id": st.st_uid,
        "group_id": st.st_gid,
        "permission_bits": st.st_mode & 0o777,
    }


def apply_metadata(path: Path, record: "ManifestRecord") -> None:
    """
    Re-apply the recorded owner, group, and permission bits to PATH.

    chown runs before chmod because changing ownership may clear
    setuid/setgid bits.

    Raises:
        PermissionApplyError: either call failed; the path may be left
            half-configured, so callers must stop the run.
    """
    if not record.has_metadata:
        return
    try:
        os.chown(path, record.owner_id, record.group_id)
    except OSError as e:
        raise PermissionApplyError(
            f"Could not set owner {record.owner_id}:{record.group_id} on {path}: {e}", path=path
        ) from e
    try:
        os.chmod(path, record.permission_bits)
    except OSError as e:
        raise PermissionApplyError(
            f"Could not set mode {record.permission_bits:04o} on {path}: {e}", path=path
        ) from e
