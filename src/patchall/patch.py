"""
patch.py — Bring the live filesystem in line with the package.

Per-record failures (unreadable files, failed copies, missing package
entries) are recorded and the run continues. A PermissionApplyError is
not caught here: a path left with half-applied ownership or mode must
stop the run.
"""

from dataclasses import dataclass, field
from typing import List

from tqdm import tqdm

from patchall.config import PatchConfig
from patchall.engine import Decision, DiffEngine
from patchall.manifest import ManifestStore
from patchall.session import save_run_session


@dataclass
class PatchResult:
    """Statistics for a patch run."""
    records: int = 0
    files_patched: int = 0
    missing_replaced: int = 0
    stale_replaced: int = 0
    backed_up: int = 0
    unchanged: int = 0
    skipped: int = 0
    dry_run: bool = False
    patched_paths: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def patch_system(config: PatchConfig, dry_run: bool = False, journal: bool = True) -> PatchResult:
    """
    Patch every manifest record whose live path is missing or stale.

    Backups from the previous patch run are cleared first, so after a run
    the backup area holds exactly the pre-patch copies of files this run
    replaced. With DRY_RUN nothing on disk changes, backups included.

    Raises:
        NotFoundError: no manifest
        ManifestFormatError: manifest is corrupt
        PermissionApplyError: ownership/mode could not be applied
    """
    records = ManifestStore(config.manifest).load()
    engine = DiffEngine(config)
    result = PatchResult(records=len(records), dry_run=dry_run)

    if dry_run:
        print("🔍 DRY-RUN MODE (no changes will be made)")
    else:
        engine.vault.clear()
    print(f"🩹 Patching from {config.root}")

    for record in tqdm(records, desc="🩹 Patching", disable=None):
        outcome = engine.decide_patch(record) if dry_run else engine.patch_record(record)

        if outcome.decision is Decision.REPLACE:
            result.files_patched += 1
            result.patched_paths.append(record.path)
            if outcome.reason == "missing":
                result.missing_replaced += 1
            else:
                result.stale_replaced += 1
            if outcome.backed_up:
                result.backed_up += 1
            if dry_run:
                print(f"🔎 Would patch ({outcome.reason}): {record.path}")
        elif outcome.decision is Decision.NOOP:
            result.unchanged += 1
        else:
            result.skipped += 1
            if outcome.error:
                print(f"⚠️ Skipped {record.path}: {outcome.error}")
                result.errors.append(outcome.error)

    if result.files_patched:
        verb = "would patch" if dry_run else "patched"
        print(f"✅ Complete. {verb} {result.files_patched:,} files")
    else:
        print("✅ Complete. All files are intact and no action was taken.")

    if journal and not dry_run:
        save_run_session(config.session_dir, "patch", result)
    return result
