"""
Tests for the stdout/stderr master log tee.
"""

import io
import sys

import pytest

from patchall import masterlog


@pytest.fixture
def fresh_log_state(monkeypatch):
    monkeypatch.setattr(masterlog, "_LOG_SETUP", False)
    monkeypatch.setattr(masterlog, "_LOG_PATH", None)
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    monkeypatch.setattr(sys, "stderr", io.StringIO())


def test_log_file_env_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("PATCHALL_LOG_FILE", str(tmp_path / "custom.log"))
    monkeypatch.setenv("PATCHALL_LOG_DIR", str(tmp_path / "ignored"))
    assert masterlog.log_path_from_env() == tmp_path / "custom.log"


def test_log_dir_env(tmp_path, monkeypatch):
    monkeypatch.delenv("PATCHALL_LOG_FILE", raising=False)
    monkeypatch.setenv("PATCHALL_LOG_DIR", str(tmp_path))
    assert masterlog.log_path_from_env() == tmp_path / "patchall.log"


def test_output_is_copied_to_log(tmp_path, monkeypatch, fresh_log_state):
    monkeypatch.delenv("PATCHALL_LOG_DISABLED", raising=False)
    monkeypatch.setenv("PATCHALL_LOG_FILE", str(tmp_path / "logs" / "run.log"))
    console = sys.stdout

    assert masterlog.setup_master_log() == tmp_path / "logs" / "run.log"
    print("📍 Scanning: /etc")
    sys.stdout.flush()

    assert "📍 Scanning: /etc" in console.getvalue()
    assert "📍 Scanning: /etc" in (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")


def test_disabled_log_leaves_streams_alone(tmp_path, monkeypatch, fresh_log_state):
    monkeypatch.setenv("PATCHALL_LOG_DISABLED", "1")
    monkeypatch.setenv("PATCHALL_LOG_FILE", str(tmp_path / "run.log"))
    console = sys.stdout

    assert masterlog.setup_master_log() is None
    assert sys.stdout is console
    assert not (tmp_path / "run.log").exists()


def test_broken_pipe_stops_writes():
    class Closed(io.StringIO):
        def write(self, text):
            raise BrokenPipeError()

    log = io.StringIO()
    tee = masterlog.TeeStream(Closed(), log)
    assert tee.write("a") == 0
    assert tee.write("b") == 0
    assert log.getvalue() == ""
