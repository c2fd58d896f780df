"""Tests for the mirrored backup/package area."""

import os
import stat

from patchall.vault import BackupVault


def test_backup_file_mirrors_absolute_path(tmp_path):
    live = tmp_path / "live" / "etc" / "app.conf"
    live.parent.mkdir(parents=True)
    live.write_text("original")

    vault = BackupVault(tmp_path / "backup")
    assert vault.backup(live) is True

    entry = vault.entry_path(live)
    assert entry == tmp_path / "backup" / str(live).lstrip("/")
    assert entry.read_text() == "original"
    assert vault.has_entry(live)


def test_backup_file_parent_inherits_mode(tmp_path):
    live_dir = tmp_path / "live"
    live_dir.mkdir()
    os.chmod(live_dir, 0o750)
    live = live_dir / "secret.txt"
    live.write_text("s")

    vault = BackupVault(tmp_path / "backup")
    vault.backup(live)

    parent_mode = stat.S_IMODE(vault.entry_path(live).parent.stat().st_mode)
    assert parent_mode == 0o750


def test_backup_directory_copies_subtree(tmp_path):
    live = tmp_path / "live"
    (live / "nested").mkdir(parents=True)
    (live / "a.txt").write_text("a")
    (live / "nested" / "b.txt").write_text("b")

    vault = BackupVault(tmp_path / "backup")
    assert vault.backup(live) is True

    entry = vault.entry_path(live)
    assert (entry / "a.txt").read_text() == "a"
    assert (entry / "nested" / "b.txt").read_text() == "b"


def test_backup_missing_source_returns_false(tmp_path, capsys):
    vault = BackupVault(tmp_path / "backup")
    assert vault.backup(tmp_path / "missing.txt") is False
    assert "missing.txt" in capsys.readouterr().out
    assert not (tmp_path / "backup").exists()


def test_backup_overwrites_previous_copy(tmp_path):
    live = tmp_path / "f.txt"
    live.write_text("one")
    vault = BackupVault(tmp_path / "backup")
    vault.backup(live)
    live.write_text("two")
    vault.backup(live)
    assert vault.entry_path(live).read_text() == "two"


def test_clear_removes_vault(tmp_path):
    live = tmp_path / "f.txt"
    live.write_text("x")
    vault = BackupVault(tmp_path / "backup")
    vault.backup(live)
    vault.clear()
    assert not (tmp_path / "backup").exists()
    vault.clear()


def test_has_entry_only_for_file_copies(tmp_path):
    live = tmp_path / "live"
    live.mkdir()
    vault = BackupVault(tmp_path / "backup")
    vault.backup(live)
    assert vault.entry_path(live).is_dir()
    assert not vault.has_entry(live)
