from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Group:
    id: int
    name: str
    description: Optional[str] = None
    is_master: bool = False
    can_view_all: bool = False
    can_edit_all: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_master": int(self.is_master),
            "can_view_all": int(self.can_view_all),
            "can_edit_all": int(self.can_edit_all),
        }


@dataclass(frozen=True)
class Role:
    id: int
    name: str
    description: Optional[str] = None
    can_create: bool = False
    can_read: bool = True
    can_update: bool = False
    can_delete: bool = False
    can_manage_users: bool = False
    can_access_all_groups: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "can_create": int(self.can_create),
            "can_read": int(self.can_read),
            "can_update": int(self.can_update),
            "can_delete": int(self.can_delete),
            "can_manage_users": int(self.can_manage_users),
            "can_access_all_groups": int(self.can_access_all_groups),
        }


@dataclass(frozen=True)
class User:
    """Domain entity: a login account in auth.db.

    Note: password_hash must never be serialized; use ``to_public_dict``.
    """

    id: int
    username: str
    password_hash: str
    full_name: str
    group_id: int
    email: Optional[str] = None
    is_active: bool = True
    is_superuser: bool = False
    role_id: Optional[int] = None
    employee_id: Optional[int] = None
    color_mode: str = "system"
    last_login: Optional[str] = None
    created_at: Optional[str] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "group_id": self.group_id,
            "is_active": int(self.is_active),
            "is_superuser": int(self.is_superuser),
            "role_id": self.role_id,
            "employee_id": self.employee_id,
            "color_mode": self.color_mode,
            "last_login": self.last_login,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class AuthUser:
    """The authenticated caller, with group and role attached."""

    id: int
    username: str
    full_name: str
    group_id: int
    email: Optional[str] = None
    is_superuser: bool = False
    role_id: Optional[int] = None
    employee_id: Optional[int] = None
    group: Optional[Group] = None
    role: Optional[Role] = None

    @classmethod
    def from_user(cls, user: User, *, group: Optional[Group], role: Optional[Role]) -> "AuthUser":
        return cls(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            group_id=user.group_id,
            email=user.email,
            is_superuser=user.is_superuser,
            role_id=user.role_id,
            employee_id=user.employee_id,
            group=group,
            role=role,
        )

    @property
    def is_master(self) -> bool:
        return bool(self.group and self.group.is_master)

    @property
    def can_view_all(self) -> bool:
        return bool(self.group and (self.group.is_master or self.group.can_view_all))

    @property
    def can_edit_all(self) -> bool:
        return bool(self.group and (self.group.is_master or self.group.can_edit_all))

    @property
    def can_manage_users(self) -> bool:
        return bool(self.role and self.role.can_manage_users)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "group_id": self.group_id,
            "is_superuser": int(self.is_superuser),
            "role_id": self.role_id,
            "employee_id": self.employee_id,
            "group": self.group.to_dict() if self.group else None,
            "role": self.role.to_dict() if self.role else None,
        }


# Columns PUT /api/users may change besides password and is_superuser.
USER_UPDATABLE_FIELDS = ("username", "full_name", "email", "group_id", "is_active", "role_id", "employee_id")
GROUP_UPDATABLE_FIELDS = ("name", "description", "is_master", "can_view_all", "can_edit_all")
