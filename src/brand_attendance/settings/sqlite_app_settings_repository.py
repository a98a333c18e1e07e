from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import AppSetting
from .repository import AppSettingsRepository


def _to_setting(row: dict) -> AppSetting:
    return AppSetting(
        key=row["key"],
        value=row.get("value"),
        description=row.get("description"),
        updated_by=row.get("updated_by"),
        updated_at=row.get("updated_at"),
    )


class SQLiteAppSettingsRepository(AppSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[AppSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM app_settings WHERE key = ?", (key,))
            row = fetchone(cur)
            return _to_setting(row) if row else None

    def list_all(self) -> Sequence[AppSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM app_settings ORDER BY key")
            return [_to_setting(r) for r in fetchall(cur)]

    def upsert(self, *, key: str, value: str, updated_by: Optional[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_settings (key, value, updated_by)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_by = excluded.updated_by,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value, updated_by),
            )
