from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import JobTitle
from .repository import JobTitleRepository

_WRITABLE = ("name", "description", "is_active")


def _to_job_title(row: dict) -> JobTitle:
    return JobTitle(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        is_active=bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SQLiteJobTitleRepository(JobTitleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[JobTitle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM job_titles WHERE is_active = 1 ORDER BY name")
            return [_to_job_title(r) for r in fetchall(cur)]

    def get_by_id(self, job_title_id: int) -> Optional[JobTitle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM job_titles WHERE id = ?", (job_title_id,))
            row = fetchone(cur)
            return _to_job_title(row) if row else None

    def get_by_name(self, name: str) -> Optional[JobTitle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM job_titles WHERE name = ?", (name,))
            row = fetchone(cur)
            return _to_job_title(row) if row else None

    def create(self, *, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO job_titles (name, description) VALUES (?, ?)", (name, description))
            return int(cur.lastrowid)

    def update(self, job_title_id: int, fields: dict) -> bool:
        columns = [k for k in fields if k in _WRITABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE job_titles SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                [fields[c] for c in columns] + [job_title_id],
            )
            return cur.rowcount > 0
