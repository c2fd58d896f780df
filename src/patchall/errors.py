"""
errors.py — Failure taxonomy for build / patch / restore runs.

Per-entry OSErrors are caught where they happen and recorded on the phase
result. Only the errors below escape a phase, and the CLI turns them into
a non-zero exit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PatchallError(RuntimeError):
    """Base class for failures that stop a run."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(PatchallError, FileNotFoundError):
    """A tree root, manifest config, or manifest does not exist."""


class ManifestFormatError(PatchallError, ValueError):
    """A manifest line could not be parsed."""

    def __init__(self, message: str, *, path: Optional[Path] = None, line_no: Optional[int] = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message, path=path)
        self.line_no = line_no


class ManifestWriteError(PatchallError, OSError):
    """The manifest could not be created or appended to."""


class PermissionApplyError(PatchallError, PermissionError):
    """Ownership or permission bits could not be applied to a patched path."""
