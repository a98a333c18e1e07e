from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..core.enums import AuditAction, BackupType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from ..users.model import AuthUser
from .manager import BackupManager
from .model import DATABASE_NAMES, BackupMetadata


class BackupService:
    """Backup administration on behalf of a signed-in user."""

    def __init__(self, manager: BackupManager, audit: AuditService):
        self._manager = manager
        self._audit = audit

    @staticmethod
    def _require_admin(actor: AuthUser) -> None:
        if not PermissionService.can_manage_backups(actor):
            raise AuthorizationError("Forbidden - Backup management requires admin access")

    def list_backups(self, actor: AuthUser) -> list[dict]:
        self._require_admin(actor)
        return self._manager.list_backups()

    def status(self, actor: AuthUser) -> dict:
        self._require_admin(actor)
        return {
            "enabled": True,
            "lastBackup": self._manager.last_backup(),
            "storage": self._manager.storage_usage(),
        }

    def create_manual(self, actor: AuthUser, *, client: Optional[ClientInfo] = None) -> BackupMetadata:
        self._require_admin(actor)
        backup = self._manager.create_backup(BackupType.MANUAL.value, actor.username)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="backups",
            new_values={"backupId": backup.id, "type": backup.type},
            client=client,
        )
        return backup

    def get(self, actor: AuthUser, backup_id: str) -> BackupMetadata:
        self._require_admin(actor)
        backup = self._manager.get_backup(backup_id)
        if backup is None:
            raise NotFoundError("Backup not found")
        return backup

    def verify(self, actor: AuthUser, backup_id: str) -> dict:
        self._require_admin(actor)
        return self._manager.verify_backup(backup_id)

    def restore(self, actor: AuthUser, backup_id: str, *, client: Optional[ClientInfo] = None) -> dict:
        self._require_admin(actor)
        result = self._manager.restore_backup(backup_id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.RESTORE,
            table_name="backups",
            new_values={"restoredFrom": backup_id},
            client=client,
        )
        return result

    def delete(self, actor: AuthUser, backup_id: str, *, client: Optional[ClientInfo] = None) -> None:
        self._require_admin(actor)
        backup = self.get(actor, backup_id)
        self._manager.delete_backup(backup_id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.DELETE,
            table_name="backups",
            old_values=backup.to_dict(),
            client=client,
        )

    def download_path(self, actor: AuthUser, backup_id: str, database: Optional[str]) -> Path:
        self._require_admin(actor)
        database = database or "attendance"
        if database not in DATABASE_NAMES:
            raise ValidationError("db must be 'attendance' or 'auth'")
        paths = self._manager.backup_paths(backup_id)
        if paths is None:
            raise NotFoundError("Backup not found")
        if not paths[database].exists():
            raise NotFoundError("Backup file not found")
        return paths[database]
