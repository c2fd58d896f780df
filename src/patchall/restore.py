# src/patchall/restore.py

from dataclasses import dataclass, field
from typing import List

from tqdm import tqdm

from patchall.config import PatchConfig
from patchall.engine import Decision, DiffEngine
from patchall.manifest import ManifestStore
from patchall.session import save_run_session


@dataclass
class RestoreResult:
    """Statistics for a restore run."""
    records: int = 0
    files_restored: int = 0
    unchanged: int = 0
    no_backup: int = 0
    restored_paths: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def restore_system(config: PatchConfig, journal: bool = True) -> RestoreResult:
    """
    Return patched files to their pre-patch content using the backup area.

    Only files with a backup entry are considered, and a file is copied
    back only when its digest differs from the backup, so re-running is a
    no-op.
    """
    records = ManifestStore(config.manifest).load()
    engine = DiffEngine(config)
    result = RestoreResult(records=len(records))

    print(f"⏪ Restoring from {config.backup_dir}")
    for record in tqdm(records, desc="⏪ Restoring", disable=None):
        outcome = engine.restore_record(record)
        if outcome.decision is Decision.RESTORE:
            result.files_restored += 1
            result.restored_paths.append(record.path)
        elif outcome.decision is Decision.NOOP:
            result.unchanged += 1
        elif outcome.error:
            print(f"⚠️ Skipped {record.path}: {outcome.error}")
            result.errors.append(outcome.error)
        else:
            result.no_backup += 1

    if result.files_restored:
        print(f"✅ Complete. Restored {result.files_restored:,} files")
    else:
        print("✅ Complete. All files are already in their original state.")

    if journal:
        save_run_session(config.session_dir, "restore", result)
    return result
