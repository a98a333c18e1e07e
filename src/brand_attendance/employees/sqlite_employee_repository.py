from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone, placeholders
from .model import UPDATABLE_FIELDS, Employee
from .repository import EmployeeRepository

_INSERTABLE = set(UPDATABLE_FIELDS) | {"created_by"}


def _to_employee(row: dict) -> Employee:
    return Employee(
        id=int(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        employee_number=row.get("employee_number"),
        email=row.get("email"),
        role=row.get("role") or "employee",
        group_id=row.get("group_id"),
        date_of_hire=row.get("date_of_hire"),
        rehire_date=row.get("rehire_date"),
        employment_type=row.get("employment_type") or "full_time",
        seniority_rank=row.get("seniority_rank"),
        is_exempt=bool(row.get("is_exempt") or 0),
        created_by=row.get("created_by"),
        is_active=bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SQLiteEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM employees WHERE id = ?", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        sql = "SELECT * FROM employees"
        if not include_inactive:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY last_name, first_name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_employee(r) for r in fetchall(cur)]

    def _exists(self, column: str, value: str, exclude_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id FROM employees WHERE {column} = ? AND id != ?",
                (value, exclude_id if exclude_id is not None else -1),
            )
            return cur.fetchone() is not None

    def exists_with_number(self, employee_number: str, *, exclude_id: Optional[int] = None) -> bool:
        return self._exists("employee_number", employee_number, exclude_id)

    def exists_with_email(self, email: str, *, exclude_id: Optional[int] = None) -> bool:
        return self._exists("email", email, exclude_id)

    def create(self, fields: dict) -> int:
        columns = [k for k in fields if k in _INSERTABLE]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees ({', '.join(columns)}) VALUES ({placeholders(len(columns))})",
                [fields[c] for c in columns],
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, fields: dict) -> bool:
        columns = [k for k in fields if k in UPDATABLE_FIELDS]
        if not columns:
            return False
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                [fields[c] for c in columns] + [employee_id],
            )
            return cur.rowcount > 0

    def deactivate(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active = 0, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (employee_id,),
            )
            return cur.rowcount > 0
