"""
session.py — Persist a JSON journal for each build / patch / restore run
"""

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path

import orjson

from patchall import __version__


def save_run_session(session_dir: Path, phase: str, result) -> Path:
    """
    Save run metadata as JSON under SESSION_DIR.
    RESULT may be a dataclass or a plain dict.
    """
    session_dir = Path(session_dir)
    session_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.now(timezone.utc)
    timestamp = now.strftime("%Y%m%dT%H%M%S%fZ")
    output_file = session_dir / f"{phase}_session_{timestamp}.json"

    metadata = asdict(result) if is_dataclass(result) else dict(result)
    metadata["phase"] = phase
    metadata["timestamp"] = timestamp
    metadata["version"] = __version__
    metadata["tool"] = "patchall"

    output_file.write_bytes(orjson.dumps(metadata, option=orjson.OPT_INDENT_2, default=str))

    print(f"📝 Saved {phase} session log: {output_file}")
    return output_file
