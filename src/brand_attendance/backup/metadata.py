from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import structlog

from ..common.datetime_utils import now_utc, utc_iso
from .model import BackupMetadata

logger = structlog.get_logger(__name__)

METADATA_FILENAME = "metadata.json"
METADATA_VERSION = 1


class BackupMetadataStore:
    """``metadata.json`` in the backups directory: ``{version, lastUpdated, backups[]}``."""

    def __init__(self, backups_dir: Path):
        self._path = Path(backups_dir) / METADATA_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[BackupMetadata]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return [BackupMetadata.from_dict(b) for b in data.get("backups", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError):
            logger.exception("backup_metadata_corrupt", path=str(self._path))
            return []

    def save(self, backups: list[BackupMetadata]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        store = {
            "version": METADATA_VERSION,
            "lastUpdated": utc_iso(now_utc()),
            "backups": [b.to_dict() for b in backups],
        }
        self._path.write_text(json.dumps(store, indent=2), encoding="utf-8")

    def get(self, backup_id: str) -> Optional[BackupMetadata]:
        for backup in self.load():
            if backup.id == backup_id:
                return backup
        return None

    def upsert(self, backup: BackupMetadata) -> None:
        backups = self.load()
        for index, existing in enumerate(backups):
            if existing.id == backup.id:
                backups[index] = backup
                break
        else:
            backups.append(backup)
        self.save(backups)

    def remove(self, backup_id: str) -> None:
        self.save([b for b in self.load() if b.id != backup_id])

    def by_type(self, backup_type: str) -> list[BackupMetadata]:
        """Oldest first."""
        return sorted((b for b in self.load() if b.type == backup_type), key=lambda b: b.timestamp)
