from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import USER_UPDATABLE_FIELDS, User
from .repository import UserRepository

_WRITABLE = set(USER_UPDATABLE_FIELDS) | {"password_hash", "is_superuser", "color_mode"}


def _to_user(row: dict) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        group_id=int(row["group_id"]),
        email=row.get("email"),
        is_active=bool(row.get("is_active", 1)),
        is_superuser=bool(row.get("is_superuser") or 0),
        role_id=row.get("role_id"),
        employee_id=row.get("employee_id"),
        color_mode=row.get("color_mode") or "system",
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


class SQLiteUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM users WHERE username = ?", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_with_group_names(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.*, g.name AS group_name
                FROM users u
                LEFT JOIN groups g ON g.id = u.group_id
                ORDER BY u.username
                """
            )
            out: list[dict] = []
            for r in fetchall(cur):
                data = _to_user(r).to_public_dict()
                data["group_name"] = r.get("group_name")
                out.append(data)
            return out

    def create(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str,
        email: Optional[str],
        group_id: int,
        role_id: Optional[int],
        is_superuser: bool,
        employee_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users (username, password_hash, full_name, email, group_id, role_id,
                                   is_superuser, employee_id, is_active)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1)
                """,
                (username, password_hash, full_name, email, group_id, role_id, int(is_superuser), employee_id),
            )
            return int(cur.lastrowid)

    def update(self, user_id: int, fields: dict) -> bool:
        columns = [k for k in fields if k in _WRITABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                [fields[c] for c in columns] + [user_id],
            )
            return cur.rowcount > 0

    def touch_last_login(self, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?", (user_id,))

    def linked_employee_ids(self, *, exclude_user_id: Optional[int] = None) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM users WHERE employee_id IS NOT NULL AND id != ?",
                (exclude_user_id if exclude_user_id is not None else -1,),
            )
            return {int(r["employee_id"]) for r in fetchall(cur)}

    def find_by_employee_id(self, employee_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM users WHERE employee_id = ?", (employee_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None
