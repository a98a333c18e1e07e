"""Tiered backups of the two SQLite databases.

Daily backups roll up into weekly ones, weekly into monthly; monthly backups
beyond retention are deleted. Every backup set is checksummed so a restore can
refuse to run on a damaged copy.
"""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import structlog
from dateutil.parser import isoparse

from ..common.datetime_utils import now_utc, utc_iso
from ..core.constants import RETENTION_DAILY, RETENTION_MONTHLY, RETENTION_WEEKLY
from ..core.enums import BackupType
from ..core.exceptions import BackupError, DomainError, NotFoundError
from ..database.connection import DBConfig
from .metadata import BackupMetadataStore
from .model import DATABASE_NAMES, BackupFile, BackupMetadata, RotationResult
from .utils import backup_filename, checksum, generate_backup_id

logger = structlog.get_logger(__name__)

FILE_NOT_FOUND = "FILE_NOT_FOUND"


def _delete_file(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


class BackupManager:
    def __init__(
        self,
        db_config: DBConfig,
        *,
        retention_daily: int = RETENTION_DAILY,
        retention_weekly: int = RETENTION_WEEKLY,
        retention_monthly: int = RETENTION_MONTHLY,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._db_config = db_config
        self._retention = {
            BackupType.DAILY.value: retention_daily,
            BackupType.WEEKLY.value: retention_weekly,
            BackupType.MONTHLY.value: retention_monthly,
        }
        self._clock = clock
        self._store = BackupMetadataStore(self.backups_dir)

    @property
    def backups_dir(self) -> Path:
        return self._db_config.backups_dir

    def _type_dir(self, backup_type: str) -> Path:
        return self.backups_dir / backup_type

    def _file_path(self, backup: BackupMetadata, database: str) -> Path:
        return self._type_dir(backup.type) / backup.databases[database].filename

    def _source_paths(self) -> dict[str, Path]:
        return {"attendance": self._db_config.attendance_path, "auth": self._db_config.auth_path}

    def _ensure_dirs(self) -> None:
        for backup_type in BackupType:
            self._type_dir(backup_type.value).mkdir(parents=True, exist_ok=True)

    def _require(self, backup_id: str) -> BackupMetadata:
        backup = self._store.get(backup_id)
        if backup is None:
            raise NotFoundError(f"Backup not found: {backup_id}")
        return backup

    # -- create / rotate ---------------------------------------------------

    def create_backup(self, backup_type: str = BackupType.DAILY.value, created_by: str = "system") -> BackupMetadata:
        sources = self._source_paths()
        if not sources["attendance"].exists():
            raise BackupError("Attendance database not found")
        if not sources["auth"].exists():
            raise BackupError("Auth database not found")

        self._ensure_dirs()
        moment = self._clock()
        backup_id = generate_backup_id(backup_type, moment)

        databases: dict[str, BackupFile] = {}
        try:
            for name in DATABASE_NAMES:
                filename = backup_filename(backup_id, name)
                dest = self._type_dir(backup_type) / filename
                shutil.copyfile(sources[name], dest)
                databases[name] = BackupFile(filename=filename, size=dest.stat().st_size, checksum=checksum(dest))
        except OSError as e:
            logger.exception("backup_copy_failed", backup_id=backup_id)
            raise BackupError(str(e)) from e

        backup = BackupMetadata(
            id=backup_id,
            type=backup_type,
            timestamp=utc_iso(moment),
            databases=databases,
            created_by=created_by,
        )
        self._store.upsert(backup)
        logger.info("backup_created", backup_id=backup_id, type=backup_type, created_by=created_by)

        if backup_type == BackupType.DAILY.value:
            rotation = self.rotate_backups()
            if rotation.promoted or rotation.deleted or rotation.errors:
                logger.info("backups_rotated", **rotation.to_dict())
        return backup

    def rotate_backups(self) -> RotationResult:
        result = RotationResult()
        steps = (
            (BackupType.DAILY.value, BackupType.WEEKLY.value),
            (BackupType.WEEKLY.value, BackupType.MONTHLY.value),
        )
        for source_type, target_type in steps:
            backups = self._store.by_type(source_type)
            while len(backups) > self._retention[source_type]:
                oldest = backups.pop(0)
                try:
                    self._promote(oldest, target_type)
                    result.promoted.append(f"{oldest.id} -> {target_type}")
                except (OSError, KeyError, DomainError) as e:
                    result.errors.append(f"Failed to promote {oldest.id}: {e}")

        monthly = self._store.by_type(BackupType.MONTHLY.value)
        while len(monthly) > self._retention[BackupType.MONTHLY.value]:
            oldest = monthly.pop(0)
            try:
                self.delete_backup(oldest.id)
                result.deleted.append(oldest.id)
            except (OSError, KeyError, DomainError) as e:
                result.errors.append(f"Failed to delete {oldest.id}: {e}")
        return result

    def _promote(self, backup: BackupMetadata, target_type: str) -> BackupMetadata:
        new_id = generate_backup_id(target_type, isoparse(backup.timestamp))
        self._type_dir(target_type).mkdir(parents=True, exist_ok=True)

        databases: dict[str, BackupFile] = {}
        for name in DATABASE_NAMES:
            old_file = backup.databases[name]
            filename = backup_filename(new_id, name)
            shutil.copyfile(self._file_path(backup, name), self._type_dir(target_type) / filename)
            databases[name] = BackupFile(filename=filename, size=old_file.size, checksum=old_file.checksum)
        for name in DATABASE_NAMES:
            _delete_file(self._file_path(backup, name))

        self._store.remove(backup.id)
        promoted = BackupMetadata(
            id=new_id,
            type=target_type,
            timestamp=backup.timestamp,
            databases=databases,
            promoted_from=backup.id,
            created_by=backup.created_by,
        )
        self._store.upsert(promoted)
        return promoted

    # -- read --------------------------------------------------------------

    def list_backups(self) -> list[dict]:
        """Newest first, each with the on-disk ``totalSize``."""
        items = []
        for backup in self._store.load():
            total = 0
            for name in backup.databases:
                path = self._file_path(backup, name)
                if path.exists():
                    total += path.stat().st_size
            item = backup.to_dict()
            item["totalSize"] = total
            items.append(item)
        items.sort(key=lambda b: b["timestamp"], reverse=True)
        return items

    def get_backup(self, backup_id: str) -> Optional[BackupMetadata]:
        return self._store.get(backup_id)

    def backup_paths(self, backup_id: str) -> Optional[dict[str, Path]]:
        backup = self._store.get(backup_id)
        if backup is None:
            return None
        return {name: self._file_path(backup, name) for name in DATABASE_NAMES}

    def storage_usage(self) -> dict:
        by_type = {t.value: 0 for t in BackupType}
        counts = {t.value: 0 for t in BackupType}
        total = 0
        for backup in self._store.load():
            total += backup.size
            by_type[backup.type] = by_type.get(backup.type, 0) + backup.size
            counts[backup.type] = counts.get(backup.type, 0) + 1
        return {"total": total, "byType": by_type, "backupCount": counts}

    def last_backup(self) -> Optional[dict]:
        backups = self.list_backups()
        return backups[0] if backups else None

    # -- verify / restore / delete ------------------------------------------

    def verify_backup(self, backup_id: str) -> dict:
        backup = self._require(backup_id)
        databases = {}
        for name in DATABASE_NAMES:
            path = self._file_path(backup, name)
            actual = checksum(path) if path.exists() else FILE_NOT_FOUND
            expected = backup.databases[name].checksum
            databases[name] = {"valid": actual == expected, "expectedChecksum": expected, "actualChecksum": actual}
        return {"id": backup_id, "valid": all(d["valid"] for d in databases.values()), "databases": databases}

    def restore_backup(self, backup_id: str) -> dict:
        backup = self._require(backup_id)
        if not self.verify_backup(backup_id)["valid"]:
            raise BackupError("Backup integrity check failed. Checksums do not match.")

        try:
            self.create_backup(BackupType.MANUAL.value, "pre-restore")
        except BackupError as e:
            logger.warning("pre_restore_backup_failed", backup_id=backup_id, error=str(e))

        sources = self._source_paths()
        try:
            for name in DATABASE_NAMES:
                shutil.copyfile(self._file_path(backup, name), sources[name])
        except OSError as e:
            logger.exception("backup_restore_failed", backup_id=backup_id)
            raise BackupError(str(e)) from e

        logger.info("backup_restored", backup_id=backup_id)
        return {"success": True, "restoredFrom": backup_id}

    def delete_backup(self, backup_id: str) -> None:
        backup = self._require(backup_id)
        for name in backup.databases:
            _delete_file(self._file_path(backup, name))
        self._store.remove(backup_id)
        logger.info("backup_deleted", backup_id=backup_id)

    def cleanup(self) -> list[str]:
        """Drop metadata whose files are gone; returns the orphaned ids."""
        valid, orphaned = [], []
        for backup in self._store.load():
            if all(name in backup.databases and self._file_path(backup, name).exists() for name in DATABASE_NAMES):
                valid.append(backup)
            else:
                orphaned.append(backup.id)
        if orphaned:
            self._store.save(valid)
            logger.info("backup_metadata_cleaned", orphaned=orphaned)
        return orphaned
