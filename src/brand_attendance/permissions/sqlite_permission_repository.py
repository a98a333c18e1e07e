from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import GroupPermission, UserGroupPermission
from .repository import PermissionRepository


def _to_permission(row: dict) -> UserGroupPermission:
    return UserGroupPermission(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        group_id=int(row["group_id"]),
        can_create=bool(row.get("can_create") or 0),
        can_read=bool(row.get("can_read") or 0),
        can_update=bool(row.get("can_update") or 0),
        can_delete=bool(row.get("can_delete") or 0),
        group_name=row.get("group_name"),
    )


class SQLitePermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_user_group_permission(self, user_id: int, group_id: int) -> Optional[UserGroupPermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM user_group_permissions WHERE user_id = ? AND group_id = ?",
                (user_id, group_id),
            )
            row = fetchone(cur)
            return _to_permission(row) if row else None

    def list_user_group_permissions(self, user_id: int) -> Sequence[UserGroupPermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.*, g.name AS group_name
                FROM user_group_permissions p
                LEFT JOIN groups g ON g.id = p.group_id
                WHERE p.user_id = ?
                ORDER BY g.name
                """,
                (user_id,),
            )
            return [_to_permission(r) for r in fetchall(cur)]

    def upsert_user_group_permission(self, *, user_id, group_id, can_create, can_read, can_update, can_delete) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_group_permissions
                    (user_id, group_id, can_create, can_read, can_update, can_delete)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, group_id) DO UPDATE SET
                    can_create = excluded.can_create,
                    can_read = excluded.can_read,
                    can_update = excluded.can_update,
                    can_delete = excluded.can_delete,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (user_id, group_id, int(can_create), int(can_read), int(can_update), int(can_delete)),
            )

    def delete_user_group_permission(self, user_id: int, group_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM user_group_permissions WHERE user_id = ? AND group_id = ?",
                (user_id, group_id),
            )
            return cur.rowcount > 0

    def get_group_permission(self, group_id: int, target_group_id: int) -> Optional[GroupPermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM group_permissions WHERE group_id = ? AND target_group_id = ?",
                (group_id, target_group_id),
            )
            row = fetchone(cur)
            if not row:
                return None
            return GroupPermission(
                group_id=int(row["group_id"]),
                target_group_id=int(row["target_group_id"]),
                can_view=bool(row.get("can_view") or 0),
                can_edit=bool(row.get("can_edit") or 0),
            )

    def all_group_ids(self) -> list[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM groups ORDER BY id")
            return [int(r["id"]) for r in fetchall(cur)]
