from __future__ import annotations

from typing import Any, Optional

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import AuthUser
from .repository import AppSettingsRepository


class AppSettingsService:
    """Key/value settings shared by every user, stored in auth.db."""

    def __init__(self, settings: AppSettingsRepository, audit: AuditService):
        self._settings = settings
        self._audit = audit

    def get(self, key: str) -> Optional[str]:
        setting = self._settings.get(key)
        return setting.value if setting else None

    def set(self, key: str, value: Any, user_id: Optional[int] = None) -> None:
        self._settings.upsert(key=key, value=str(value), updated_by=user_id)

    def all(self) -> dict[str, Optional[str]]:
        return {s.key: s.value for s in self._settings.list_all()}

    @staticmethod
    def _require_superuser(actor: AuthUser) -> None:
        if not actor.is_superuser:
            raise AuthorizationError("Forbidden - Superuser access required")

    def all_for(self, actor: AuthUser) -> dict[str, Optional[str]]:
        self._require_superuser(actor)
        return self.all()

    def update(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> None:
        self._require_superuser(actor)
        key = str(data.get("key") or "").strip()
        if not key or data.get("value") is None:
            raise ValidationError("Key and value are required")

        old = self.get(key)
        self.set(key, data["value"], actor.id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="app_settings",
            old_values={"key": key, "value": old},
            new_values={"key": key, "value": str(data["value"])},
            client=client,
        )
