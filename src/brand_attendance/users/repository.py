from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group, Role, User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_with_group_names(self) -> Sequence[dict]:
        """Public user dicts plus ``group_name``; never includes password hashes."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, user_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int) -> None:
        raise NotImplementedError

    def linked_employee_ids(self, *, exclude_user_id: Optional[int] = None) -> set[int]:
        raise NotImplementedError

    def find_by_employee_id(self, employee_id: int) -> Optional[User]:
        raise NotImplementedError


class GroupRepository(Protocol):
    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Group]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        is_master: bool,
        can_view_all: bool,
        can_edit_all: bool,
    ) -> int:
        raise NotImplementedError

    def update(self, group_id: int, fields: dict) -> bool:
        raise NotImplementedError


class RoleRepository(Protocol):
    def list_all(self) -> Sequence[Role]:
        raise NotImplementedError

    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError
