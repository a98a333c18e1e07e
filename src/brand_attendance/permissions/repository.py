from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GroupPermission, UserGroupPermission


class PermissionRepository(Protocol):
    def get_user_group_permission(self, user_id: int, group_id: int) -> Optional[UserGroupPermission]:
        raise NotImplementedError

    def list_user_group_permissions(self, user_id: int) -> Sequence[UserGroupPermission]:
        raise NotImplementedError

    def upsert_user_group_permission(
        self,
        *,
        user_id: int,
        group_id: int,
        can_create: bool,
        can_read: bool,
        can_update: bool,
        can_delete: bool,
    ) -> None:
        raise NotImplementedError

    def delete_user_group_permission(self, user_id: int, group_id: int) -> bool:
        raise NotImplementedError

    def get_group_permission(self, group_id: int, target_group_id: int) -> Optional[GroupPermission]:
        raise NotImplementedError

    def all_group_ids(self) -> list[int]:
        raise NotImplementedError
