from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import GROUP_UPDATABLE_FIELDS, Group, Role
from .repository import GroupRepository, RoleRepository


def _to_group(row: dict) -> Group:
    return Group(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        is_master=bool(row.get("is_master") or 0),
        can_view_all=bool(row.get("can_view_all") or 0),
        can_edit_all=bool(row.get("can_edit_all") or 0),
    )


def _to_role(row: dict) -> Role:
    return Role(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        can_create=bool(row.get("can_create") or 0),
        can_read=bool(row.get("can_read") or 0),
        can_update=bool(row.get("can_update") or 0),
        can_delete=bool(row.get("can_delete") or 0),
        can_manage_users=bool(row.get("can_manage_users") or 0),
        can_access_all_groups=bool(row.get("can_access_all_groups") or 0),
    )


class SQLiteGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM groups ORDER BY name")
            return [_to_group(r) for r in fetchall(cur)]

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM groups WHERE id = ?", (group_id,))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def get_by_name(self, name: str) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM groups WHERE name = ?", (name,))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def create(self, *, name, description, is_master, can_view_all, can_edit_all) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO groups (name, description, is_master, can_view_all, can_edit_all)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, description, int(is_master), int(can_view_all), int(can_edit_all)),
            )
            return int(cur.lastrowid)

    def update(self, group_id: int, fields: dict) -> bool:
        columns = [k for k in fields if k in GROUP_UPDATABLE_FIELDS]
        if not columns:
            return False
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE groups SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                [fields[c] for c in columns] + [group_id],
            )
            return cur.rowcount > 0


class SQLiteRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM roles ORDER BY id")
            return [_to_role(r) for r in fetchall(cur)]

    def get_by_id(self, role_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM roles WHERE id = ?", (role_id,))
            row = fetchone(cur)
            return _to_role(row) if row else None
