from datetime import datetime, timezone

import pytest

from brand_attendance.backup.utils import (
    backup_filename,
    checksum,
    format_bytes,
    generate_backup_id,
    parse_backup_id,
)

MOMENT = datetime(2026, 3, 4, 5, 6, 7, 890000, tzinfo=timezone.utc)


def test_backup_ids_per_tier():
    assert generate_backup_id("daily", MOMENT) == "daily-2026-03-04"
    assert generate_backup_id("weekly", MOMENT) == "weekly-2026-W10"
    assert generate_backup_id("monthly", MOMENT) == "monthly-2026-03"
    assert generate_backup_id("manual", MOMENT) == "manual-2026-03-04T05-06-07-890Z"
    with pytest.raises(ValueError):
        generate_backup_id("hourly", MOMENT)


def test_parse_backup_id():
    assert parse_backup_id("weekly-2026-W10") == ("weekly", "2026-W10")
    assert parse_backup_id("nightly-1") is None
    assert parse_backup_id("") is None


def test_filename_and_checksum(tmp_path):
    assert backup_filename("daily-2026-03-04", "auth") == "daily-2026-03-04-auth.db"
    path = tmp_path / "x.db"
    path.write_bytes(b"abc")
    assert checksum(path) == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_format_bytes():
    assert format_bytes(0) == "0 Bytes"
    assert format_bytes(512) == "512 Bytes"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(5 * 1024 * 1024) == "5 MB"
