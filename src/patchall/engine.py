"""
engine.py — Per-record reconciliation between the manifest and the live filesystem.

Every decision compares a stored or backed-up digest with a freshly
computed digest of the live file. Timestamps are never consulted.

Patch direction (package -> live):
    package entry unresolvable      -> SKIP
    live path missing               -> REPLACE (nothing to back up)
    live file, digest differs       -> back up, then REPLACE
    live file, digest matches       -> NOOP
    live directory for a dir record -> NOOP

Restore direction (backup -> live):
    no backup entry                 -> SKIP
    backup digest == live digest    -> NOOP
    otherwise                       -> RESTORE
"""

import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from patchall.config import PatchConfig
from patchall.fingerprint import hash_mismatch, try_fingerprint
from patchall.manifest import ManifestRecord
from patchall.metadata import apply_metadata
from patchall.vault import BackupVault


class Decision(str, Enum):
    NOOP = "noop"
    REPLACE = "replace"
    RESTORE = "restore"
    SKIP = "skip"


@dataclass
class Outcome:
    """What the engine decided (and did) for one record."""
    record: ManifestRecord
    decision: Decision
    reason: str = ""
    backed_up: bool = False
    error: Optional[str] = None


def _stat_or_none(path: Path) -> Optional[os.stat_result]:
    try:
        return os.stat(path)
    except FileNotFoundError:
        return None


class DiffEngine:
    def __init__(self, config: PatchConfig):
        self.config = config
        self.package = BackupVault(config.files_dir)
        self.vault = BackupVault(config.backup_dir)

    # -- patch ---------------------------------------------------------

    def decide_patch(self, record: ManifestRecord) -> Outcome:
        """Decide what patching RECORD would do, without touching the filesystem."""
        source = self.package.entry_path(record.path)
        try:
            os.stat(source)
        except OSError as e:
            return Outcome(record, Decision.SKIP, reason="no package entry", error=f"{source}: {e}")

        live = Path(record.path)
        try:
            live_st = _stat_or_none(live)
        except OSError as e:
            return Outcome(record, Decision.SKIP, reason="cannot stat live path", error=f"{live}: {e}")

        if live_st is None:
            return Outcome(record, Decision.REPLACE, reason="missing")

        if record.is_dir:
            if stat.S_ISDIR(live_st.st_mode):
                return Outcome(record, Decision.NOOP, reason="directory present")
            return Outcome(record, Decision.SKIP, reason="type mismatch",
                           error=f"{live}: expected a directory")

        if not stat.S_ISREG(live_st.st_mode):
            return Outcome(record, Decision.SKIP, reason="type mismatch",
                           error=f"{live}: expected a regular file")

        live_hash = try_fingerprint(live)
        if live_hash is None:
            return Outcome(record, Decision.SKIP, reason="unreadable", error=f"{live}: could not fingerprint")
        if live_hash != record.content_hash:
            return Outcome(record, Decision.REPLACE, reason="stale")
        return Outcome(record, Decision.NOOP, reason="intact")

    def patch_record(self, record: ManifestRecord) -> Outcome:
        """
        Reconcile one record toward the package.

        Raises:
            PermissionApplyError: ownership/permissions could not be applied
        """
        outcome = self.decide_patch(record)
        if outcome.decision is not Decision.REPLACE:
            return outcome

        live = Path(record.path)
        source = self.package.entry_path(record.path)

        if outcome.reason == "stale":
            if not self.vault.backup(live):
                outcome.decision = Decision.SKIP
                outcome.error = f"{live}: backup failed, not replaced"
                return outcome
            outcome.backed_up = True
        else:
            print(f"ℹ️  Not backed up, not present on the system: {live}")

        print(f"🩹 Patching {live}")
        try:
            if record.is_dir:
                live.mkdir(parents=True, exist_ok=True)
            else:
                live.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, live)
        except OSError as e:
            outcome.decision = Decision.SKIP
            outcome.error = f"{live}: copy failed ({e})"
            print(f"⚠️ Could not patch: {live} ({e})")
            return outcome

        if self.config.supports_ownership:
            apply_metadata(live, record)
        return outcome

    # -- restore -------------------------------------------------------

    def decide_restore(self, record: ManifestRecord) -> Outcome:
        if not self.vault.has_entry(record.path):
            return Outcome(record, Decision.SKIP, reason="no backup")
        backup = self.vault.entry_path(record.path)

        live = Path(record.path)
        if not live.exists():
            return Outcome(record, Decision.RESTORE, reason="missing")

        mismatch = hash_mismatch(backup, live)
        if mismatch is None:
            return Outcome(record, Decision.SKIP, reason="unreadable",
                           error=f"{live}: could not compare with backup")
        if not mismatch:
            return Outcome(record, Decision.NOOP, reason="matches backup")
        return Outcome(record, Decision.RESTORE, reason="differs from backup")

    def restore_record(self, record: ManifestRecord) -> Outcome:
        outcome = self.decide_restore(record)
        if outcome.decision is not Decision.RESTORE:
            return outcome

        live = Path(record.path)
        backup = self.vault.entry_path(record.path)
        print(f"⏪ Restoring {live}")
        try:
            live.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(backup, live)
        except OSError as e:
            outcome.decision = Decision.SKIP
            outcome.error = f"{live}: restore failed ({e})"
            print(f"⚠️ Could not restore: {live} ({e})")
        return outcome
