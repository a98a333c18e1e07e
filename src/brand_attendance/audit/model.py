from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ClientInfo:
    ip_address: str = "unknown"
    user_agent: str = "unknown"


@dataclass(frozen=True)
class AuditEntry:
    """Read-model of audit_log joined with the acting user."""

    id: int
    user_id: int
    action: str
    table_name: str
    record_id: Optional[int]
    old_values: Optional[str]
    new_values: Optional[str]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: Optional[str]
    username: Optional[str] = None
    full_name: Optional[str] = None

    @staticmethod
    def _decode(raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "full_name": self.full_name,
            "action": self.action,
            "table_name": self.table_name,
            "record_id": self.record_id,
            "old_values": self._decode(self.old_values),
            "new_values": self._decode(self.new_values),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at,
        }
