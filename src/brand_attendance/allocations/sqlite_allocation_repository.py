from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import Allocation
from .repository import AllocationRepository


def _to_allocation(row: dict) -> Allocation:
    return Allocation(
        id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        time_code=row["time_code"],
        allocated_hours=float(row["allocated_hours"]),
        year=int(row["year"]),
        time_code_id=row.get("time_code_id"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SQLiteAllocationRepository(AllocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def for_employee_year(self, employee_id: int, year: int) -> Sequence[Allocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM employee_time_allocations WHERE employee_id = ? AND year = ? ORDER BY time_code",
                (employee_id, year),
            )
            return [_to_allocation(r) for r in fetchall(cur)]

    def for_year(self, year: int) -> Sequence[Allocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM employee_time_allocations WHERE year = ?", (year,))
            return [_to_allocation(r) for r in fetchall(cur)]

    def get(self, employee_id: int, time_code: str, year: int) -> Optional[Allocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM employee_time_allocations
                WHERE employee_id = ? AND time_code = ? AND year = ?
                """,
                (employee_id, time_code, year),
            )
            row = fetchone(cur)
            return _to_allocation(row) if row else None

    def upsert(self, *, employee_id, time_code, time_code_id, allocated_hours, year, notes) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_time_allocations
                    (employee_id, time_code, time_code_id, allocated_hours, year, notes)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(employee_id, time_code, year) DO UPDATE SET
                    time_code_id = excluded.time_code_id,
                    allocated_hours = excluded.allocated_hours,
                    notes = excluded.notes,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (employee_id, time_code, time_code_id, allocated_hours, year, notes),
            )

    def delete(self, employee_id: int, time_code: str, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employee_time_allocations WHERE employee_id = ? AND time_code = ? AND year = ?",
                (employee_id, time_code, year),
            )
            return cur.rowcount > 0
