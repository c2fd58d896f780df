"""
manifest.py — Line-oriented record of every tracked path.

Each line is `hash,path` or `hash,path,uid,gid,perms`. Lines are written
through the csv module, so ordinary paths come out byte-for-byte in that
form and paths containing commas are quoted instead of splitting the record.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from patchall.errors import ManifestFormatError, ManifestWriteError, NotFoundError
from patchall.fingerprint import DIRECTORY_HASH

BASE_FIELDS = 2
METADATA_FIELDS = 5


@dataclass(frozen=True)
class ManifestRecord:
    """One tracked path. Metadata fields are None on platforms without POSIX ownership."""
    content_hash: str
    path: str
    owner_id: Optional[int] = None
    group_id: Optional[int] = None
    permission_bits: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.content_hash == DIRECTORY_HASH

    @property
    def has_metadata(self) -> bool:
        return self.owner_id is not None

    @classmethod
    def from_metadata(cls, content_hash: str, path, metadata: dict) -> "ManifestRecord":
        return cls(content_hash=content_hash, path=str(path), **metadata)

    def to_fields(self) -> List[str]:
        fields = [self.content_hash, self.path]
        if self.has_metadata:
            fields += [str(self.owner_id), str(self.group_id), f"{self.permission_bits:04o}"]
        return fields

    @classmethod
    def from_fields(cls, fields: List[str], line_no: Optional[int] = None) -> "ManifestRecord":
        if len(fields) not in (BASE_FIELDS, METADATA_FIELDS):
            raise ManifestFormatError(
                f"expected {BASE_FIELDS} or {METADATA_FIELDS} fields, got {len(fields)}",
                line_no=line_no,
            )
        content_hash, path = fields[0], fields[1]
        if not content_hash or not path:
            raise ManifestFormatError("empty hash or path", line_no=line_no)
        if len(fields) == BASE_FIELDS:
            return cls(content_hash=content_hash, path=path)
        try:
            return cls(
                content_hash=content_hash,
                path=path,
                owner_id=int(fields[2]),
                group_id=int(fields[3]),
                permission_bits=int(fields[4], 8),
            )
        except ValueError as e:
            raise ManifestFormatError(f"bad metadata for {path}: {e}", line_no=line_no) from e


def format_record(record: ManifestRecord) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(record.to_fields())
    return buf.getvalue()


def parse_record(line: str, line_no: Optional[int] = None) -> ManifestRecord:
    try:
        rows = list(csv.reader([line], strict=True))
    except csv.Error as e:
        raise ManifestFormatError(str(e), line_no=line_no) from e
    return ManifestRecord.from_fields(rows[0] if rows else [], line_no=line_no)


class ManifestStore:
    """Owns the manifest file: truncate at build start, append per entry, load all."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def create(self) -> None:
        """Replace any existing manifest with an empty one."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(f"Could not create manifest {self.path}: {e}", path=self.path) from e

    def append(self, record: ManifestRecord) -> None:
        try:
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                f.write(format_record(record))
        except OSError as e:
            raise ManifestWriteError(f"Could not append to manifest {self.path}: {e}", path=self.path) from e

    def load(self) -> List[ManifestRecord]:
        """
        Read every record. Paths must be unique.

        Raises:
            NotFoundError: manifest does not exist
            ManifestFormatError: any line is malformed or repeats a path
        """
        if not self.path.is_file():
            raise NotFoundError(f"Manifest not found: {self.path}", path=self.path)

        records: List[ManifestRecord] = []
        seen = set()
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line:
                    continue
                record = parse_record(line, line_no=line_no)
                if record.path in seen:
                    raise ManifestFormatError(
                        f"duplicate path {record.path}", path=self.path, line_no=line_no
                    )
                seen.add(record.path)
                records.append(record)
        return records


def read_manifest_config(config_path: Path) -> List[Path]:
    """
    Read the operator's list of tracked roots.

    Blank lines and `#` comments are ignored; relative paths are skipped
    with a warning.
    """
    if not Path(config_path).is_file():
        raise NotFoundError(f"Manifest config not found: {config_path}", path=Path(config_path))

    roots: List[Path] = []
    with open(config_path, "r", encoding="utf-8") as f:
        for line in f:
            entry = line.strip()
            if not entry or entry.startswith("#"):
                continue
            path = Path(entry)
            if not path.is_absolute():
                print(f"⚠️ Skipping relative path in {Path(config_path).name}: {entry}")
                continue
            roots.append(path)
    return roots
