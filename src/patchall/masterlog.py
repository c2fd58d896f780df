# src/patchall/masterlog.py

import os
import sys
import time
from pathlib import Path
from typing import Optional

from patchall import __version__

_LOG_SETUP = False
_LOG_PATH: Optional[Path] = None
_RUN_HEADER_EMITTED = False


class TeeStream:
    """Write to the console stream and copy everything into the log file."""

    def __init__(self, primary, log_file):
        self._primary = primary
        self._log_file = log_file
        self._broken = False
        self.encoding = getattr(primary, "encoding", "utf-8")

    def write(self, text):
        if self._broken:
            return 0
        try:
            result = self._primary.write(text)
        except BrokenPipeError:
            self._broken = True
            return 0
        try:
            self._log_file.write(text)
        except OSError:
            pass
        return result

    def flush(self):
        if self._broken:
            return
        try:
            self._primary.flush()
        except BrokenPipeError:
            self._broken = True
            return
        try:
            self._log_file.flush()
        except OSError:
            pass

    def isatty(self):
        return self._primary.isatty()

    def fileno(self):
        return self._primary.fileno()


def log_path_from_env() -> Path:
    log_file = os.environ.get("PATCHALL_LOG_FILE")
    if log_file:
        return Path(os.path.expanduser(log_file))
    log_dir = os.environ.get("PATCHALL_LOG_DIR")
    base_dir = Path(log_dir) if log_dir else (Path.home() / ".logs" / "patchall")
    return base_dir / "patchall.log"


def setup_master_log() -> Optional[Path]:
    """Tee stdout/stderr into ~/.logs/patchall/patchall.log (or $PATCHALL_LOG_FILE)."""
    global _LOG_SETUP, _LOG_PATH
    if _LOG_SETUP:
        return _LOG_PATH
    _LOG_SETUP = True
    if os.environ.get("PATCHALL_LOG_DISABLED") == "1":
        return None
    log_path = log_path_from_env()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_file = open(log_path, "a", encoding="utf-8", buffering=1)
    except OSError:
        return None
    sys.stdout = TeeStream(sys.stdout, log_file)
    sys.stderr = TeeStream(sys.stderr, log_file)
    _LOG_PATH = log_path
    return log_path


def emit_run_header() -> None:
    global _RUN_HEADER_EMITTED
    if _RUN_HEADER_EMITTED:
        return
    timestamp = time.strftime("%Y-%m-%dT%H:%M:%S%z")
    print(f"🧾 patchall v{__version__} @ {timestamp}")
    if _LOG_PATH:
        print(f"🧾 log: {_LOG_PATH}")
    _RUN_HEADER_EMITTED = True
