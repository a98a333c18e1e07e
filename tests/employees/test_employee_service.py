from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import pytest

from brand_attendance.audit.service import AuditService
from brand_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from brand_attendance.employees.model import Employee
from brand_attendance.employees.service import EmployeeService
from brand_attendance.users.model import AuthUser


class InMemoryEmployees:
    def __init__(self, employees: list[Employee] | None = None):
        self._rows = {e.id: e for e in employees or []}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(employee_id)

    def list_all(self, *, include_inactive: bool = False):
        rows = [e for e in self._rows.values() if include_inactive or e.is_active]
        return sorted(rows, key=lambda e: (e.last_name, e.first_name))

    def exists_with_number(self, employee_number, *, exclude_id=None) -> bool:
        return any(e.employee_number == employee_number and e.id != exclude_id for e in self._rows.values())

    def exists_with_email(self, email, *, exclude_id=None) -> bool:
        return any(e.email == email and e.id != exclude_id for e in self._rows.values())

    def create(self, fields: dict) -> int:
        new_id = max(self._rows, default=0) + 1
        data = dict(fields)
        data["is_active"] = bool(data.get("is_active", 1))
        self._rows[new_id] = Employee(id=new_id, **data)
        return new_id

    def update(self, employee_id: int, fields: dict) -> bool:
        self._rows[employee_id] = replace(self._rows[employee_id], **fields)
        return True

    def deactivate(self, employee_id: int) -> bool:
        self._rows[employee_id] = replace(self._rows[employee_id], is_active=False)
        return True


@dataclass
class FakePermissions:
    superusers: set[int] = field(default_factory=set)
    grants: dict[tuple[int, int], set[str]] = field(default_factory=dict)

    def is_superuser(self, user_id: int) -> bool:
        return user_id in self.superusers

    def _has(self, user_id: int, group_id: int, flag: str) -> bool:
        return self.is_superuser(user_id) or flag in self.grants.get((user_id, group_id), set())

    def can_read_group(self, user_id, group_id):
        return self._has(user_id, group_id, "read")

    def can_create_in_group(self, user_id, group_id):
        return self._has(user_id, group_id, "create")

    def can_update_in_group(self, user_id, group_id):
        return self._has(user_id, group_id, "update")

    def can_delete_in_group(self, user_id, group_id):
        return self._has(user_id, group_id, "delete")

    def readable_groups(self, user_id):
        return [g for (u, g), flags in self.grants.items() if u == user_id and "read" in flags]


class InMemoryAudit:
    def __init__(self):
        self.rows: list[dict] = []

    def insert(self, **row) -> int:
        self.rows.append(row)
        return len(self.rows)


ADMIN = AuthUser(id=1, username="admin", full_name="Admin", group_id=1, is_superuser=True)
CLERK = AuthUser(id=2, username="clerk", full_name="Clerk", group_id=4)


@pytest.fixture
def audit_rows():
    return InMemoryAudit()


@pytest.fixture
def permissions():
    return FakePermissions(superusers={1}, grants={(2, 4): {"read", "create", "update"}})


@pytest.fixture
def service(permissions, audit_rows):
    employees = InMemoryEmployees(
        [
            Employee(id=1, first_name="Ann", last_name="Able", group_id=4, employee_number="E1", date_of_hire="2015-01-01"),
            Employee(id=2, first_name="Bob", last_name="Baker", group_id=3, date_of_hire="2010-01-01"),
            Employee(id=3, first_name="Cy", last_name="Cole", group_id=None, date_of_hire="2012-01-01"),
            Employee(id=4, first_name="Dee", last_name="Dunn", group_id=4, is_active=False),
        ]
    )
    return EmployeeService(employees, permissions, AuditService(audit_rows))


def test_list_visible_scopes_by_readable_groups(service):
    assert [e.id for e in service.list_visible(CLERK)] == [1, 3]
    assert [e.id for e in service.list_visible(ADMIN)] == [1, 2, 3]


def test_include_inactive_only_for_superusers(service):
    assert 4 in [e.id for e in service.list_visible(ADMIN, include_inactive=True)]
    assert 4 not in [e.id for e in service.list_visible(CLERK, include_inactive=True)]


def test_get_checks_group_read_permission(service):
    assert service.get(CLERK, "1").first_name == "Ann"
    with pytest.raises(AuthorizationError):
        service.get(CLERK, 2)
    with pytest.raises(NotFoundError):
        service.get(ADMIN, 99)


def test_seniority_list_numbers_positions(service):
    rows = service.seniority_list(ADMIN)
    assert [(r["id"], r["seniority_position"]) for r in rows] == [(2, 1), (3, 2), (1, 3)]


def test_create_normalizes_and_audits(service, audit_rows):
    employee = service.create(
        CLERK,
        {"first_name": " Eve ", "last_name": "Evans", "group_id": 4, "email": "", "employment_type": None},
    )
    assert employee.first_name == "Eve"
    assert employee.email is None
    assert employee.role == "employee"
    assert employee.employment_type == "full_time"
    assert employee.created_by == CLERK.id
    assert audit_rows.rows[-1]["action"] == "CREATE"
    assert audit_rows.rows[-1]["table_name"] == "employees"


def test_create_rejects_bad_input(service):
    with pytest.raises(ValidationError, match="First name and last name are required"):
        service.create(ADMIN, {"first_name": "Solo"})
    with pytest.raises(ValidationError, match="Employee number already exists"):
        service.create(ADMIN, {"first_name": "A", "last_name": "B", "employee_number": "E1"})
    with pytest.raises(ValidationError) as exc:
        service.create(ADMIN, {"first_name": "A", "last_name": "B", "seniority_rank": 7})
    assert exc.value.errors[0]["field"] == "seniority_rank"
    with pytest.raises(AuthorizationError):
        service.create(CLERK, {"first_name": "A", "last_name": "B", "group_id": 3})


def test_update_validates_against_merged_record(service, audit_rows):
    with pytest.raises(ValidationError):
        service.update(ADMIN, {"id": 2, "rehire_date": "2009-01-01"})
    updated = service.update(ADMIN, {"id": 2, "rehire_date": "2019-01-01", "ignored": "x"})
    assert updated.rehire_date == "2019-01-01"
    assert audit_rows.rows[-1]["action"] == "UPDATE"
    with pytest.raises(ValidationError, match="No fields to update"):
        service.update(ADMIN, {"id": 2, "ignored": "x"})


def test_delete_is_soft_and_needs_permission(service):
    with pytest.raises(AuthorizationError):
        service.delete(CLERK, 1)
    service.delete(ADMIN, 1)
    assert service.get(ADMIN, 1).is_active is False


def test_update_coerces_group_id_and_exempt_flag(service):
    updated = service.update(ADMIN, {"id": 3, "group_id": "4", "is_exempt": True})
    assert (updated.group_id, updated.is_exempt) == (4, 1)
    assert service.update(ADMIN, {"id": 3, "group_id": ""}).group_id is None

    with pytest.raises(ValidationError):
        service.update(ADMIN, {"id": 3, "group_id": "abc"})
    assert service.get(ADMIN, 3).group_id is None


def test_create_defaults_exempt_flag_off(service):
    employee = service.create(ADMIN, {"first_name": "Fay", "last_name": "Ford"})
    assert employee.is_exempt == 0
    assert employee.to_dict()["is_exempt"] == 0
