from __future__ import annotations

from typing import Any, Optional

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..common.validators import optional_int, require_int
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from ..users.model import AuthUser
from .model import UPDATABLE_FIELDS, Employee
from .repository import EmployeeRepository
from .seniority import sort_by_seniority
from .validation import normalize_employment_type, validate_employee_fields

_NULLABLE_TEXT = ("employee_number", "email", "date_of_hire", "rehire_date")


def _clean(fields: dict) -> dict:
    """Blank strings mean NULL for optional text columns."""
    out = dict(fields)
    for name in _NULLABLE_TEXT:
        if name in out and isinstance(out[name], str) and not out[name].strip():
            out[name] = None
    return out


class EmployeeService:
    """Use case: employee CRUD scoped by group permissions."""

    def __init__(self, employees: EmployeeRepository, permissions: PermissionService, audit: AuditService):
        self._employees = employees
        self._permissions = permissions
        self._audit = audit

    def _require(self, employee_id: Any) -> Employee:
        employee = self._employees.get_by_id(require_int(employee_id, "Employee ID"))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _check_unique(self, fields: dict, *, exclude_id: Optional[int] = None) -> None:
        number = fields.get("employee_number")
        if number and self._employees.exists_with_number(number, exclude_id=exclude_id):
            raise ValidationError("Employee number already exists")
        email = fields.get("email")
        if email and self._employees.exists_with_email(email, exclude_id=exclude_id):
            raise ValidationError("Email already exists")

    @staticmethod
    def _validate(fields: dict) -> None:
        result = validate_employee_fields(fields)
        if not result.valid:
            raise ValidationError("Validation failed", result.errors)

    def get(self, actor: AuthUser, employee_id: Any) -> Employee:
        employee = self._require(employee_id)
        if employee.group_id is not None and not self._permissions.can_read_group(actor.id, employee.group_id):
            raise AuthorizationError("Forbidden - No read permission for this employee")
        return employee

    def list_visible(self, actor: AuthUser, *, include_inactive: bool = False) -> list[Employee]:
        superuser = self._permissions.is_superuser(actor.id)
        employees = self._employees.list_all(include_inactive=include_inactive and superuser)
        if superuser:
            return list(employees)
        readable = set(self._permissions.readable_groups(actor.id))
        return [e for e in employees if e.group_id is None or e.group_id in readable]

    def seniority_list(self, actor: AuthUser) -> list[dict]:
        ordered = sort_by_seniority(self.list_visible(actor))
        out = []
        for position, employee in enumerate(ordered, start=1):
            data = employee.to_dict()
            data["seniority_position"] = position
            out.append(data)
        return out

    def create(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> Employee:
        group_id = optional_int(data.get("group_id"), "group_id")
        if group_id is not None and not self._permissions.can_create_in_group(actor.id, group_id):
            raise AuthorizationError("Forbidden - No create permission for this group")

        first_name = str(data.get("first_name") or "").strip()
        last_name = str(data.get("last_name") or "").strip()
        if not first_name or not last_name:
            raise ValidationError("First name and last name are required")

        fields = _clean({k: data[k] for k in UPDATABLE_FIELDS if k in data})
        self._validate(fields)
        self._check_unique(fields)

        fields.update(
            first_name=first_name,
            last_name=last_name,
            group_id=group_id,
            role=fields.get("role") or "employee",
            employment_type=normalize_employment_type(fields.get("employment_type")),
            is_exempt=1 if fields.get("is_exempt") else 0,
            is_active=1,
            created_by=actor.id,
        )
        employee_id = self._employees.create(fields)
        employee = self._employees.get_by_id(employee_id)

        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="employees",
            record_id=employee_id,
            new_values=employee.to_dict() if employee else fields,
            client=client,
        )
        return employee

    def update(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> Employee:
        if data.get("id") in (None, ""):
            raise ValidationError("Employee ID is required")
        old = self._require(data["id"])

        if old.group_id is not None and not self._permissions.can_update_in_group(actor.id, old.group_id):
            raise AuthorizationError("Forbidden - No update permission for this employee")

        fields = _clean({k: data[k] for k in UPDATABLE_FIELDS if k in data})
        if not fields:
            raise ValidationError("No fields to update")

        merged = old.to_dict()
        merged.update(fields)
        self._validate({k: merged.get(k) for k in ("employment_type", "seniority_rank", "date_of_hire", "rehire_date")})
        self._check_unique(fields, exclude_id=old.id)

        if "employment_type" in fields:
            fields["employment_type"] = normalize_employment_type(fields["employment_type"])
        if "group_id" in fields:
            fields["group_id"] = optional_int(fields["group_id"], "group_id")
        if "is_active" in fields:
            fields["is_active"] = 1 if fields["is_active"] else 0
        if "is_exempt" in fields:
            fields["is_exempt"] = 1 if fields["is_exempt"] else 0

        self._employees.update(old.id, fields)
        new = self._employees.get_by_id(old.id)

        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="employees",
            record_id=old.id,
            old_values=old.to_dict(),
            new_values=new.to_dict() if new else None,
            client=client,
        )
        return new

    def delete(self, actor: AuthUser, employee_id: Any, *, client: Optional[ClientInfo] = None) -> None:
        if employee_id in (None, ""):
            raise ValidationError("Employee ID is required")
        old = self._require(employee_id)

        if old.group_id is not None and not self._permissions.can_delete_in_group(actor.id, old.group_id):
            raise AuthorizationError("Forbidden - No delete permission for this employee")

        self._employees.deactivate(old.id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.DELETE,
            table_name="employees",
            record_id=old.id,
            old_values=old.to_dict(),
            client=client,
        )
