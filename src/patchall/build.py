# src/patchall/build.py

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set

from tqdm import tqdm

from patchall.config import PatchConfig
from patchall.errors import NotFoundError
from patchall.fingerprint import DIRECTORY_HASH, try_fingerprint
from patchall.manifest import ManifestRecord, ManifestStore, read_manifest_config
from patchall.metadata import collect_metadata
from patchall.pathing import is_under
from patchall.session import save_run_session
from patchall.vault import BackupVault
from patchall.walker import TreeEntry, walk_tree


@dataclass
class BuildResult:
    """Statistics for a build run."""
    roots: int = 0
    records_written: int = 0
    files_packaged: int = 0
    directories: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def _reset_outputs(config: PatchConfig) -> None:
    for d in (config.backup_dir, config.files_dir):
        if d.exists():
            shutil.rmtree(d)
    config.files_dir.mkdir(parents=True, exist_ok=True)


def _is_owned(entry: TreeEntry, owned_files, owned_dirs) -> bool:
    """True for the patch root's own manifest, manifest.cfg and output directories."""
    if not entry.is_dir and entry.path.resolve() in owned_files:
        return True
    return any(is_under(entry.path, d) for d in owned_dirs)


def build_package(config: PatchConfig, journal: bool = True) -> BuildResult:
    """
    Build the package and manifest from the roots listed in manifest.cfg.

    Leftover backups, package content, and the manifest from a previous
    build are discarded first.

    Raises:
        NotFoundError: manifest.cfg is missing
        ManifestWriteError: the manifest cannot be written
    """
    roots = read_manifest_config(config.manifest_config)

    print(f"🔨 Building patch in {config.root}")
    _reset_outputs(config)
    store = ManifestStore(config.manifest)
    store.create()

    package = BackupVault(config.files_dir)
    owned_dirs = (config.files_dir, config.backup_dir, config.session_dir)
    owned_files = {config.manifest.resolve(), config.manifest_config.resolve()}
    result = BuildResult(roots=len(roots))
    seen: Set[str] = set()

    def visit(entry: TreeEntry) -> None:
        key = str(entry.path)
        if key in seen:
            result.skipped += 1
            return
        if _is_owned(entry, owned_files, owned_dirs):
            result.skipped += 1
            return
        seen.add(key)

        metadata = collect_metadata(entry.path, config.supports_ownership, entry.stat)

        if entry.is_dir:
            store.append(ManifestRecord.from_metadata(DIRECTORY_HASH, key, metadata))
            result.records_written += 1
            result.directories += 1
            try:
                package.ensure_dir(entry.path)
            except OSError as e:
                print(f"⚠️ Could not create package directory for {key} ({e})")
                result.errors.append(f"{key}: {e}")
            return

        digest = try_fingerprint(entry.path)
        if digest is None:
            result.skipped += 1
            result.errors.append(f"{key}: could not fingerprint")
            return
        store.append(ManifestRecord.from_metadata(digest, key, metadata))
        result.records_written += 1
        if package.backup(entry.path):
            result.files_packaged += 1
        else:
            result.errors.append(f"{key}: could not copy into package")

    for root in tqdm(roots, desc="📦 Building", disable=None):
        try:
            walk_tree(Path(root), visit)
        except NotFoundError as e:
            print(f"⚠️ {e}")
            result.errors.append(str(e))

    if result.records_written:
        print(f"✅ Build complete. Added {result.records_written:,} entries "
              f"({result.files_packaged:,} files, {result.directories:,} directories)")
    else:
        print("✅ Build complete. No files found.")
    if result.errors:
        print(f"⚠️ {len(result.errors)} entries had errors")

    if journal:
        save_run_session(config.session_dir, "build", result)
    return result
