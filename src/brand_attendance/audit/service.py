from __future__ import annotations

import json
from typing import Any, Optional, Sequence

import structlog

from ..common.validators import require_int
from ..core.constants import DEFAULT_AUDIT_LIMIT, DEFAULT_USER_AUDIT_LIMIT
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError
from ..users.model import AuthUser
from .model import AuditEntry, ClientInfo
from .repository import AuditRepository

logger = structlog.get_logger(__name__)


def _encode(values: Optional[dict]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps(values, default=str)


class AuditService:
    """Use case: record and query who changed what."""

    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def log(
        self,
        *,
        user_id: int,
        action: AuditAction | str,
        table_name: str,
        record_id: Optional[int] = None,
        old_values: Optional[dict[str, Any]] = None,
        new_values: Optional[dict[str, Any]] = None,
        client: Optional[ClientInfo] = None,
    ) -> int:
        client = client or ClientInfo()
        action_value = action.value if isinstance(action, AuditAction) else str(action)
        entry_id = self._audit.insert(
            user_id=int(user_id),
            action=action_value,
            table_name=table_name,
            record_id=record_id,
            old_values=_encode(old_values),
            new_values=_encode(new_values),
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
        logger.info("audit_logged", action=action_value, table=table_name, record_id=record_id, user_id=user_id)
        return entry_id

    def recent(self, *, limit: int = DEFAULT_AUDIT_LIMIT, offset: int = 0) -> Sequence[AuditEntry]:
        return self._audit.recent(limit=limit, offset=offset)

    def for_record(self, *, table_name: str, record_id: int) -> Sequence[AuditEntry]:
        return self._audit.for_record(table_name=table_name, record_id=record_id)

    def for_user(self, *, user_id: int, limit: int = DEFAULT_USER_AUDIT_LIMIT) -> Sequence[AuditEntry]:
        return self._audit.for_user(user_id=user_id, limit=limit)

    def query(
        self,
        actor: AuthUser,
        *,
        table_name: Optional[str] = None,
        record_id: Any = None,
        user_id: Any = None,
        limit: Any = None,
        offset: Any = None,
    ) -> Sequence[AuditEntry]:
        """Pick the audit query the way GET /api/audit parameters describe it."""
        if not actor.can_view_all:
            raise AuthorizationError("Forbidden: You do not have permission to view audit logs")
        if table_name and record_id not in (None, ""):
            return self.for_record(table_name=table_name, record_id=require_int(record_id, "recordId"))
        if user_id not in (None, ""):
            user_limit = require_int(limit, "limit") if limit not in (None, "") else DEFAULT_USER_AUDIT_LIMIT
            return self.for_user(user_id=require_int(user_id, "userId"), limit=user_limit)
        return self.recent(
            limit=require_int(limit, "limit") if limit not in (None, "") else DEFAULT_AUDIT_LIMIT,
            offset=require_int(offset, "offset") if offset not in (None, "") else 0,
        )
