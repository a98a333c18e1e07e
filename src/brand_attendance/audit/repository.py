from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def insert(
        self,
        *,
        user_id: int,
        action: str,
        table_name: str,
        record_id: Optional[int],
        old_values: Optional[str],
        new_values: Optional[str],
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> int:
        raise NotImplementedError

    def recent(self, *, limit: int, offset: int) -> Sequence[AuditEntry]:
        raise NotImplementedError

    def for_record(self, *, table_name: str, record_id: int) -> Sequence[AuditEntry]:
        raise NotImplementedError

    def for_user(self, *, user_id: int, limit: int) -> Sequence[AuditEntry]:
        raise NotImplementedError
