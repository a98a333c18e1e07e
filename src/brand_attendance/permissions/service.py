from __future__ import annotations

from typing import Optional, Sequence

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.model import AuthUser, Group, User
from ..users.repository import GroupRepository, UserRepository
from .model import UserGroupPermission
from .repository import PermissionRepository


class PermissionService:
    """Group-scoped access checks.

    Two layers exist: per-user CRUD flags (user_group_permissions, bypassed by
    superusers) and group-to-group view/edit grants (groups flags plus
    group_permissions).
    """

    def __init__(
        self,
        users: UserRepository,
        groups: GroupRepository,
        permissions: PermissionRepository,
        audit: AuditService,
    ):
        self._users = users
        self._groups = groups
        self._permissions = permissions
        self._audit = audit

    def _user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(int(user_id))

    def _group_of(self, user: User) -> Optional[Group]:
        return self._groups.get_by_id(user.group_id)

    def is_superuser(self, user_id: int) -> bool:
        user = self._user(user_id)
        return bool(user and user.is_superuser)

    def _has_flag(self, user_id: int, group_id: int, flag: str) -> bool:
        if self.is_superuser(user_id):
            return True
        permission = self._permissions.get_user_group_permission(int(user_id), int(group_id))
        return bool(permission and getattr(permission, flag))

    def can_create_in_group(self, user_id: int, group_id: int) -> bool:
        return self._has_flag(user_id, group_id, "can_create")

    def can_read_group(self, user_id: int, group_id: int) -> bool:
        return self._has_flag(user_id, group_id, "can_read")

    def can_update_in_group(self, user_id: int, group_id: int) -> bool:
        return self._has_flag(user_id, group_id, "can_update")

    def can_delete_in_group(self, user_id: int, group_id: int) -> bool:
        return self._has_flag(user_id, group_id, "can_delete")

    def can_view_group(self, user_id: int, target_group_id: int) -> bool:
        user = self._user(user_id)
        if not user:
            return False
        group = self._group_of(user)
        if group and (group.is_master or group.can_view_all):
            return True
        grant = self._permissions.get_group_permission(user.group_id, int(target_group_id))
        return bool(grant and grant.can_view)

    def can_edit_group(self, user_id: int, target_group_id: int) -> bool:
        user = self._user(user_id)
        if not user:
            return False
        group = self._group_of(user)
        if group and (group.is_master or group.can_edit_all):
            return True
        grant = self._permissions.get_group_permission(user.group_id, int(target_group_id))
        return bool(grant and grant.can_edit)

    def _groups_with_flag(self, user_id: int, flag: str) -> list[int]:
        if self.is_superuser(user_id):
            return self._permissions.all_group_ids()
        return [p.group_id for p in self._permissions.list_user_group_permissions(int(user_id)) if getattr(p, flag)]

    def readable_groups(self, user_id: int) -> list[int]:
        return self._groups_with_flag(user_id, "can_read")

    def creatable_groups(self, user_id: int) -> list[int]:
        return self._groups_with_flag(user_id, "can_create")

    @staticmethod
    def can_manage_backups(actor: AuthUser) -> bool:
        return actor.is_master or actor.can_manage_users

    # -- admin: per-user group permissions --------------------------------

    def _require_superuser(self, actor: AuthUser) -> None:
        if not self.is_superuser(actor.id):
            raise AuthorizationError("Forbidden - Superuser access required")

    def list_user_permissions(self, actor: AuthUser, *, user_id: int) -> Sequence[UserGroupPermission]:
        self._require_superuser(actor)
        return self._permissions.list_user_group_permissions(int(user_id))

    def set_user_permission(
        self,
        actor: AuthUser,
        *,
        user_id: int,
        group_id: int,
        can_create: bool = False,
        can_read: bool = True,
        can_update: bool = False,
        can_delete: bool = False,
        client: Optional[ClientInfo] = None,
    ) -> UserGroupPermission:
        self._require_superuser(actor)
        old = self._permissions.get_user_group_permission(int(user_id), int(group_id))
        self._permissions.upsert_user_group_permission(
            user_id=int(user_id),
            group_id=int(group_id),
            can_create=can_create,
            can_read=can_read,
            can_update=can_update,
            can_delete=can_delete,
        )
        new = self._permissions.get_user_group_permission(int(user_id), int(group_id))
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE if old else AuditAction.CREATE,
            table_name="user_group_permissions",
            record_id=new.id if new else None,
            old_values=old.to_dict() if old else None,
            new_values=new.to_dict() if new else None,
            client=client,
        )
        return new

    def remove_user_permission(
        self,
        actor: AuthUser,
        *,
        user_id: int,
        group_id: int,
        client: Optional[ClientInfo] = None,
    ) -> None:
        self._require_superuser(actor)
        old = self._permissions.get_user_group_permission(int(user_id), int(group_id))
        if not old:
            raise NotFoundError("Permission not found")
        self._permissions.delete_user_group_permission(int(user_id), int(group_id))
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.DELETE,
            table_name="user_group_permissions",
            record_id=old.id,
            old_values=old.to_dict(),
            client=client,
        )
