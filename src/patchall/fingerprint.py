"""
fingerprint.py — Content digests used for change detection.

MD5 is used for drift detection only, never for integrity or security.
"""

import hashlib
from pathlib import Path
from typing import Optional

# Directories carry no content digest in the manifest.
DIRECTORY_HASH = "-"

CHUNK_SIZE = 1024 * 1024


def compute_md5(file_path: Path) -> str:
    """
    Compute the MD5 hex digest of a file's full contents.

    Raises:
        OSError: file is missing or unreadable (including directories)
    """
    h = hashlib.md5()
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            h.update(chunk)
    return h.hexdigest()


def try_fingerprint(file_path: Path) -> Optional[str]:
    """Return the digest of FILE_PATH, or None (with a warning) if it cannot be read."""
    try:
        return compute_md5(file_path)
    except OSError as e:
        print(f"⚠️ Could not fingerprint: {file_path} ({e})")
        return None


def hash_mismatch(file1: Path, file2: Path) -> Optional[bool]:
    """
    Compare two files by digest.

    Returns True when contents differ, False when they match, and None when
    either side cannot be fingerprinted.
    """
    h1 = try_fingerprint(file1)
    if h1 is None:
        return None
    h2 = try_fingerprint(file2)
    if h2 is None:
        return None
    return h1 != h2
