from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserGroupPermission:
    """Per-user CRUD flags on one group (user_group_permissions row)."""

    id: int
    user_id: int
    group_id: int
    can_create: bool = False
    can_read: bool = True
    can_update: bool = False
    can_delete: bool = False
    group_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "can_create": int(self.can_create),
            "can_read": int(self.can_read),
            "can_update": int(self.can_update),
            "can_delete": int(self.can_delete),
        }


@dataclass(frozen=True)
class GroupPermission:
    """Group-to-group view/edit grant (group_permissions row)."""

    group_id: int
    target_group_id: int
    can_view: bool = False
    can_edit: bool = False
