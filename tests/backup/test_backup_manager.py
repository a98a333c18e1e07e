from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from brand_attendance.backup.manager import BackupManager
from brand_attendance.core.exceptions import BackupError, NotFoundError
from brand_attendance.database.connection import DBConfig


class Clock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db(tmp_path) -> DBConfig:
    config = DBConfig(data_dir=str(tmp_path))
    config.attendance_path.write_bytes(b"attendance-v1")
    config.auth_path.write_bytes(b"auth-v1")
    return config


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 1, 5, 2, 0, tzinfo=timezone.utc))


def make_manager(db, clock, **retention) -> BackupManager:
    return BackupManager(db, clock=clock, **retention)


def test_create_backup_copies_and_records_checksums(db, clock):
    manager = make_manager(db, clock)
    backup = manager.create_backup()

    assert backup.id == "daily-2026-01-05"
    assert backup.created_by == "system"
    assert (db.backups_dir / "daily" / "daily-2026-01-05-attendance.db").read_bytes() == b"attendance-v1"
    assert backup.size == len(b"attendance-v1") + len(b"auth-v1")

    store = json.loads((db.backups_dir / "metadata.json").read_text(encoding="utf-8"))
    assert store["version"] == 1
    assert [b["id"] for b in store["backups"]] == ["daily-2026-01-05"]
    assert manager.verify_backup(backup.id)["valid"] is True


def test_missing_database_is_an_error(db, clock):
    db.auth_path.unlink()
    with pytest.raises(BackupError, match="Auth database not found"):
        make_manager(db, clock).create_backup()


def test_daily_backups_roll_into_weekly_then_monthly(db, clock):
    manager = make_manager(db, clock, retention_daily=2, retention_weekly=1, retention_monthly=1)
    for _ in range(4):
        manager.create_backup()
        clock.advance(days=8)

    by_type = {}
    for item in manager.list_backups():
        by_type.setdefault(item["type"], []).append(item["id"])
    assert len(by_type["daily"]) == 2
    assert len(by_type["weekly"]) == 1
    assert len(by_type["monthly"]) == 1
    monthly = manager.get_backup(by_type["monthly"][0])
    assert monthly.promoted_from.startswith("weekly-")


def test_list_is_newest_first_with_sizes(db, clock):
    manager = make_manager(db, clock)
    manager.create_backup()
    clock.advance(days=1)
    manager.create_backup("manual", "admin")
    items = manager.list_backups()
    assert [i["type"] for i in items] == ["manual", "daily"]
    assert items[0]["createdBy"] == "admin"
    assert items[0]["totalSize"] == len(b"attendance-v1") + len(b"auth-v1")
    assert manager.last_backup()["id"] == items[0]["id"]


def test_verify_detects_tampering_and_restore_refuses(db, clock):
    manager = make_manager(db, clock)
    backup = manager.create_backup()
    (db.backups_dir / "daily" / f"{backup.id}-auth.db").write_bytes(b"tampered")

    result = manager.verify_backup(backup.id)
    assert result["valid"] is False
    assert result["databases"]["attendance"]["valid"] is True
    with pytest.raises(BackupError, match="integrity"):
        manager.restore_backup(backup.id)


def test_verify_reports_missing_file(db, clock):
    manager = make_manager(db, clock)
    backup = manager.create_backup()
    (db.backups_dir / "daily" / f"{backup.id}-attendance.db").unlink()
    assert manager.verify_backup(backup.id)["databases"]["attendance"]["actualChecksum"] == "FILE_NOT_FOUND"


def test_restore_replaces_databases_after_safety_backup(db, clock):
    manager = make_manager(db, clock)
    backup = manager.create_backup()
    db.attendance_path.write_bytes(b"attendance-v2")
    clock.advance(minutes=5)

    assert manager.restore_backup(backup.id) == {"success": True, "restoredFrom": backup.id}
    assert db.attendance_path.read_bytes() == b"attendance-v1"
    safety = [i for i in manager.list_backups() if i["type"] == "manual"]
    assert safety[0]["createdBy"] == "pre-restore"


def test_delete_and_unknown_ids(db, clock):
    manager = make_manager(db, clock)
    backup = manager.create_backup()
    manager.delete_backup(backup.id)
    assert manager.get_backup(backup.id) is None
    assert not (db.backups_dir / "daily" / f"{backup.id}-auth.db").exists()
    with pytest.raises(NotFoundError):
        manager.verify_backup(backup.id)


def test_cleanup_drops_orphaned_metadata(db, clock):
    manager = make_manager(db, clock)
    kept = manager.create_backup()
    clock.advance(days=1)
    lost = manager.create_backup("manual")
    (db.backups_dir / "manual" / f"{lost.id}-auth.db").unlink()

    assert manager.cleanup() == [lost.id]
    assert [i["id"] for i in manager.list_backups()] == [kept.id]


def test_storage_usage_counts_by_type(db, clock):
    manager = make_manager(db, clock)
    manager.create_backup()
    usage = manager.storage_usage()
    assert usage["backupCount"] == {"daily": 1, "weekly": 0, "monthly": 0, "manual": 0}
    assert usage["total"] == usage["byType"]["daily"] > 0


def test_corrupt_metadata_reads_as_empty(db, clock):
    manager = make_manager(db, clock)
    db.backups_dir.mkdir(parents=True, exist_ok=True)
    (db.backups_dir / "metadata.json").write_text("{oops", encoding="utf-8")
    assert manager.list_backups() == []
