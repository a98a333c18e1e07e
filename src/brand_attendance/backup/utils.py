from __future__ import annotations

import hashlib
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..common.datetime_utils import utc_iso
from ..core.enums import BackupType

_BACKUP_ID = re.compile(r"^(daily|weekly|monthly|manual)-(.+)$")
_CHUNK = 64 * 1024


def generate_backup_id(backup_type: str, moment: datetime) -> str:
    """Backup ids encode the tier and the period they cover; ``moment`` is UTC."""
    if backup_type == BackupType.DAILY.value:
        return f"daily-{moment.strftime('%Y-%m-%d')}"
    if backup_type == BackupType.WEEKLY.value:
        return f"weekly-{moment.year}-W{moment.isocalendar()[1]:02d}"
    if backup_type == BackupType.MONTHLY.value:
        return f"monthly-{moment.strftime('%Y-%m')}"
    if backup_type == BackupType.MANUAL.value:
        return "manual-" + utc_iso(moment).replace(":", "-").replace(".", "-")
    raise ValueError(f"Unknown backup type: {backup_type}")


def backup_filename(backup_id: str, database: str) -> str:
    return f"{backup_id}-{database}.db"


def parse_backup_id(backup_id: str) -> Optional[tuple[str, str]]:
    match = _BACKUP_ID.match(backup_id or "")
    if not match:
        return None
    return match.group(1), match.group(2)


def checksum(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
