from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository

_SELECT = """
    SELECT a.*, u.username, u.full_name
    FROM audit_log a
    LEFT JOIN users u ON u.id = a.user_id
"""
_ORDER = " ORDER BY a.created_at DESC, a.id DESC"


def _to_entry(row: dict) -> AuditEntry:
    return AuditEntry(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        action=row["action"],
        table_name=row["table_name"],
        record_id=row.get("record_id"),
        old_values=row.get("old_values"),
        new_values=row.get("new_values"),
        ip_address=row.get("ip_address"),
        user_agent=row.get("user_agent"),
        created_at=row.get("created_at"),
        username=row.get("username"),
        full_name=row.get("full_name"),
    )


class SQLiteAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log
                    (user_id, action, table_name, record_id, old_values, new_values, ip_address, user_agent)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, action, table_name, record_id, old_values, new_values, ip_address, user_agent),
            )
            return int(cur.lastrowid)

    def recent(self, *, limit: int, offset: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + _ORDER + " LIMIT ? OFFSET ?", (int(limit), int(offset)))
            return [_to_entry(r) for r in fetchall(cur)]

    def for_record(self, *, table_name: str, record_id: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.table_name = ? AND a.record_id = ?" + _ORDER, (table_name, record_id))
            return [_to_entry(r) for r in fetchall(cur)]

    def for_user(self, *, user_id: int, limit: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.user_id = ?" + _ORDER + " LIMIT ?", (user_id, int(limit)))
            return [_to_entry(r) for r in fetchall(cur)]
