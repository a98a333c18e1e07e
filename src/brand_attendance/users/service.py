from __future__ import annotations

from typing import Any, Optional, Sequence

import structlog
from werkzeug.security import generate_password_hash

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..common.validators import as_flag, optional_int, require_int
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import GROUP_UPDATABLE_FIELDS, USER_UPDATABLE_FIELDS, AuthUser, Group, Role, User
from .repository import GroupRepository, RoleRepository, UserRepository

logger = structlog.get_logger(__name__)

_GROUP_FLAGS = ("is_master", "can_view_all", "can_edit_all")


def _audit_view(user: Optional[User]) -> Optional[dict]:
    return user.to_public_dict() if user else None


class UserService:
    """Use case: account administration for master / HR groups."""

    def __init__(self, users: UserRepository, audit: AuditService):
        self._users = users
        self._audit = audit

    def get(self, actor: AuthUser, user_id: Any) -> User:
        if not actor.can_view_all:
            raise AuthorizationError("Forbidden: You do not have permission to view users")
        user = self._users.get_by_id(require_int(user_id, "User ID"))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, actor: AuthUser) -> Sequence[dict]:
        if not actor.can_view_all:
            raise AuthorizationError("Forbidden: You do not have permission to view users")
        return self._users.list_with_group_names()

    def create(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> User:
        if not actor.can_edit_all:
            raise AuthorizationError("Forbidden: You do not have permission to create users")

        username = str(data.get("username") or "").strip()
        password = str(data.get("password") or "")
        full_name = str(data.get("full_name") or "").strip()
        if not username or not password or not full_name or data.get("group_id") in (None, ""):
            raise ValidationError("Missing required fields: username, password, full_name, group_id")
        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user_id = self._users.create(
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            email=data.get("email") or None,
            group_id=require_int(data.get("group_id"), "group_id"),
            role_id=optional_int(data.get("role_id"), "role_id"),
            is_superuser=bool(as_flag(data.get("is_superuser"))) and actor.is_master,
            employee_id=optional_int(data.get("employee_id"), "employee_id"),
        )
        user = self._users.get_by_id(user_id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="users",
            record_id=user_id,
            new_values=_audit_view(user),
            client=client,
        )
        logger.info("user_created", user_id=user_id, username=username)
        return user

    def update(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> User:
        if not actor.can_edit_all:
            raise AuthorizationError("Forbidden: You do not have permission to edit users")
        if data.get("id") in (None, ""):
            raise ValidationError("User ID is required")
        old = self._users.get_by_id(require_int(data["id"], "User ID"))
        if not old:
            raise NotFoundError("User not found")

        fields = {k: data[k] for k in USER_UPDATABLE_FIELDS if k in data}
        if "is_active" in fields:
            fields["is_active"] = as_flag(fields["is_active"])
        if "is_superuser" in data:
            if not actor.is_master:
                raise AuthorizationError("Forbidden: Only master group can change superuser status")
            fields["is_superuser"] = as_flag(data["is_superuser"])
        if data.get("password"):
            fields["password_hash"] = generate_password_hash(str(data["password"]))
        if not fields:
            raise ValidationError("No fields to update")

        username = fields.get("username")
        if username is not None:
            other = self._users.get_by_username(str(username))
            if other and other.id != old.id:
                raise ValidationError("Username already exists")

        self._users.update(old.id, fields)
        new = self._users.get_by_id(old.id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="users",
            record_id=old.id,
            old_values=_audit_view(old),
            new_values=_audit_view(new),
            client=client,
        )
        return new

    def delete(self, actor: AuthUser, user_id: Any, *, client: Optional[ClientInfo] = None) -> None:
        if not actor.is_master:
            raise AuthorizationError("Forbidden: Only master group can delete users")
        if user_id in (None, ""):
            raise ValidationError("User ID is required")
        target_id = require_int(user_id, "User ID")
        if target_id == actor.id:
            raise ValidationError("Cannot delete your own account")
        old = self._users.get_by_id(target_id)
        if not old:
            raise NotFoundError("User not found")

        self._users.update(target_id, {"is_active": 0})
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.DELETE,
            table_name="users",
            record_id=target_id,
            old_values=_audit_view(old),
            client=client,
        )


class GroupService:
    def __init__(self, groups: GroupRepository, audit: AuditService):
        self._groups = groups
        self._audit = audit

    def list_groups(self) -> Sequence[Group]:
        return self._groups.list_all()

    def create(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> Group:
        if not actor.is_master:
            raise AuthorizationError("Forbidden: Only master group can create groups")
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Group name is required")
        if self._groups.get_by_name(name):
            raise ValidationError("Group name already exists")

        group_id = self._groups.create(
            name=name,
            description=data.get("description") or None,
            is_master=bool(as_flag(data.get("is_master"))),
            can_view_all=bool(as_flag(data.get("can_view_all"))),
            can_edit_all=bool(as_flag(data.get("can_edit_all"))),
        )
        group = self._groups.get_by_id(group_id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="groups",
            record_id=group_id,
            new_values=group.to_dict() if group else None,
            client=client,
        )
        return group

    def update(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> Group:
        if not actor.is_master:
            raise AuthorizationError("Forbidden: Only master group can update groups")
        if data.get("id") in (None, ""):
            raise ValidationError("Group ID is required")
        old = self._groups.get_by_id(require_int(data["id"], "Group ID"))
        if not old:
            raise NotFoundError("Group not found")

        fields = {k: data[k] for k in GROUP_UPDATABLE_FIELDS if k in data}
        for flag in _GROUP_FLAGS:
            if flag in fields:
                fields[flag] = as_flag(fields[flag])
        if not fields:
            raise ValidationError("No fields to update")
        if "name" in fields:
            other = self._groups.get_by_name(str(fields["name"]))
            if other and other.id != old.id:
                raise ValidationError("Group name already exists")

        self._groups.update(old.id, fields)
        new = self._groups.get_by_id(old.id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="groups",
            record_id=old.id,
            old_values=old.to_dict(),
            new_values=new.to_dict() if new else None,
            client=client,
        )
        return new


class RoleService:
    def __init__(self, roles: RoleRepository):
        self._roles = roles

    def list_roles(self, actor: AuthUser) -> Sequence[Role]:
        if not (actor.is_master or actor.can_manage_users):
            raise AuthorizationError("Forbidden: You do not have permission to view roles")
        return self._roles.list_all()


class EmployeeLinkService:
    """Use case: let a signed-in user claim (or create) their own employee record."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository, audit: AuditService):
        self._users = users
        self._employees = employees
        self._audit = audit

    def linkable_employees(self, actor: AuthUser) -> list[Employee]:
        linked = self._users.linked_employee_ids(exclude_user_id=actor.id)
        return [
            e
            for e in self._employees.list_all()
            if e.is_active and (not actor.group_id or e.group_id == actor.group_id) and e.id not in linked
        ]

    def link(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> int:
        if data.get("createNew"):
            employee_id = self._create_for(actor, data, client=client)
        elif data.get("employeeId"):
            employee_id = require_int(data["employeeId"], "employeeId")
            if not self._employees.get_by_id(employee_id):
                raise NotFoundError("Employee not found")
            owner = self._users.find_by_employee_id(employee_id)
            if owner and owner.id != actor.id:
                raise ConflictError("This employee is already linked to another user")
        else:
            raise ValidationError("Either employeeId or createNew is required")

        self._users.update(actor.id, {"employee_id": employee_id})
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="users",
            record_id=actor.id,
            old_values={"employee_id": actor.employee_id},
            new_values={"employee_id": employee_id},
            client=client,
        )
        logger.info("user_employee_linked", user_id=actor.id, employee_id=employee_id)
        return employee_id

    def _create_for(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo]) -> int:
        first_name = str(data.get("firstName") or "").strip()
        last_name = str(data.get("lastName") or "").strip()
        if not first_name or not last_name:
            raise ValidationError("firstName and lastName are required")

        fields = {
            "first_name": first_name,
            "last_name": last_name,
            "email": data.get("email") or actor.email or None,
            "role": "employee",
            "group_id": actor.group_id,
            "employment_type": "full_time",
            "created_by": actor.id,
            "is_active": 1,
        }
        employee_id = self._employees.create(fields)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="employees",
            record_id=employee_id,
            new_values={**fields, "linked_to_user": actor.id},
            client=client,
        )
        return employee_id
