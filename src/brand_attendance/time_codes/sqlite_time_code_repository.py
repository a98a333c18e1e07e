from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import TimeCode
from .repository import TimeCodeRepository


def _to_time_code(row: dict) -> TimeCode:
    return TimeCode(
        id=int(row["id"]),
        code=row["code"],
        description=row["description"],
        hours_limit=row.get("hours_limit"),
        default_allocation=row.get("default_allocation"),
        is_active=int(row.get("is_active") or 0),
        created_at=row.get("created_at"),
    )


class SQLiteTimeCodeRepository(TimeCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[TimeCode]:
        sql = "SELECT * FROM time_codes"
        if active_only:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY code"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_time_code(r) for r in fetchall(cur)]

    def get_by_code(self, code: str) -> Optional[TimeCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM time_codes WHERE code = ?", (code,))
            row = fetchone(cur)
            return _to_time_code(row) if row else None

    def insert(self, *, code, description, hours_limit, default_allocation, is_active) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_codes (code, description, hours_limit, default_allocation, is_active)
                VALUES (?, ?, ?, ?, ?)
                """,
                (code, description, hours_limit, default_allocation, int(is_active)),
            )
            return int(cur.lastrowid)

    def update(self, *, code, description, hours_limit, default_allocation, is_active) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_codes
                SET description = ?, hours_limit = ?, default_allocation = ?, is_active = ?
                WHERE code = ?
                """,
                (description, hours_limit, default_allocation, int(is_active), code),
            )
            return cur.rowcount > 0
