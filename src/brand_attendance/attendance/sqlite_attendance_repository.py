from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone, placeholders
from .model import AttendanceEntry
from .repository import AttendanceRepository


def _to_entry(row: dict) -> AttendanceEntry:
    return AttendanceEntry(
        id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        entry_date=row["entry_date"],
        time_code=row["time_code"],
        hours=float(row.get("hours") or 0),
        time_code_id=int(row.get("time_code_id") or 0),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SQLiteAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM attendance_entries ORDER BY entry_date, employee_id")
            return [_to_entry(r) for r in fetchall(cur)]

    def entries_for_range(self, employee_id: int, start: str, end: str) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM attendance_entries
                WHERE employee_id = ? AND entry_date >= ? AND entry_date <= ?
                ORDER BY entry_date
                """,
                (employee_id, start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def get(self, employee_id: int, entry_date: str) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM attendance_entries WHERE employee_id = ? AND entry_date = ?",
                (employee_id, entry_date),
            )
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def upsert(self, *, employee_id, entry_date, time_code, time_code_id, hours, notes) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_entries (employee_id, entry_date, time_code, time_code_id, hours, notes)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(employee_id, entry_date) DO UPDATE SET
                    time_code = excluded.time_code,
                    time_code_id = excluded.time_code_id,
                    hours = excluded.hours,
                    notes = excluded.notes,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (employee_id, entry_date, time_code, time_code_id, hours, notes),
            )

    def delete(self, employee_id: int, entry_date: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_entries WHERE employee_id = ? AND entry_date = ?",
                (employee_id, entry_date),
            )
            return cur.rowcount > 0

    def used_hours(self, *, year: int) -> dict[tuple[int, str], float]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, time_code, SUM(hours) AS used
                FROM attendance_entries
                WHERE entry_date >= ? AND entry_date <= ?
                GROUP BY employee_id, time_code
                """,
                (f"{year}-01-01", f"{year}-12-31"),
            )
            return {(int(r["employee_id"]), r["time_code"]): float(r["used"] or 0) for r in fetchall(cur)}

    def report_rows(
        self,
        *,
        start: str,
        end: str,
        employee_id: Optional[int] = None,
        time_code: Optional[str] = None,
        group_ids: Optional[Sequence[int]] = None,
    ) -> list[dict]:
        sql = """
            SELECT
                e.first_name || ' ' || e.last_name AS employee_name,
                te.entry_date,
                te.time_code,
                te.hours,
                te.notes
            FROM attendance_entries te
            JOIN employees e ON te.employee_id = e.id
            WHERE e.is_active = 1 AND te.entry_date >= ? AND te.entry_date <= ?
        """
        params: list = [start, end]

        if group_ids is not None:
            if group_ids:
                sql += f" AND (e.group_id IS NULL OR e.group_id IN ({placeholders(len(group_ids))}))"
                params.extend(group_ids)
            else:
                sql += " AND e.group_id IS NULL"
        if employee_id is not None:
            sql += " AND te.employee_id = ?"
            params.append(employee_id)
        if time_code:
            sql += " AND te.time_code = ?"
            params.append(time_code)
        sql += " ORDER BY te.entry_date, employee_name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return fetchall(cur)
