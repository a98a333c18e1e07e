from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import structlog

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..common.datetime_utils import is_iso_date, today_local
from ..common.validators import require_int, require_non_negative_number
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..permissions.service import PermissionService
from ..time_codes.service import TimeCodeService
from ..users.model import AuthUser
from .model import AttendanceEntry
from .repository import AttendanceRepository

logger = structlog.get_logger(__name__)


class AttendanceService:
    """Use case: read and record daily time entries."""

    def __init__(
        self,
        entries: AttendanceRepository,
        employees: EmployeeRepository,
        permissions: PermissionService,
        time_codes: TimeCodeService,
        audit: AuditService,
        *,
        today: Callable = today_local,
    ):
        self._entries = entries
        self._employees = employees
        self._permissions = permissions
        self._time_codes = time_codes
        self._audit = audit
        self._today = today

    def _employee(self, employee_id: Any) -> Employee:
        employee = self._employees.get_by_id(require_int(employee_id, "Employee ID"))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _can_view(self, actor: AuthUser, employee: Employee) -> bool:
        if employee.group_id is None or actor.can_view_all:
            return True
        if actor.group_id == employee.group_id:
            return True
        return self._permissions.can_view_group(actor.id, employee.group_id)

    def _can_edit(self, actor: AuthUser, employee: Employee) -> bool:
        if employee.group_id is None or actor.can_edit_all:
            return True
        if actor.group_id == employee.group_id:
            return True
        return self._permissions.can_edit_group(actor.id, employee.group_id)

    def list_all(self, actor: AuthUser) -> Sequence[AttendanceEntry]:
        if not actor.can_view_all:
            raise AuthorizationError("Forbidden - Cannot view all attendance entries")
        return self._entries.list_all()

    def entries_for_employee(
        self,
        actor: AuthUser,
        employee_id: Any,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        year: Any = None,
    ) -> Sequence[AttendanceEntry]:
        employee = self._employee(employee_id)
        if not self._can_view(actor, employee):
            raise AuthorizationError("Forbidden - Cannot view this employee's attendance")

        if start_date and end_date:
            return self._entries.entries_for_range(employee.id, start_date, end_date)
        target_year = require_int(year, "year") if year not in (None, "") else self._today().year
        return self._entries.entries_for_range(employee.id, f"{target_year}-01-01", f"{target_year}-12-31")

    def record(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> None:
        """Upsert (or with ``action == "delete"`` remove) one employee-day."""
        employee = self._employee(data.get("employee_id"))
        if not self._can_edit(actor, employee):
            raise AuthorizationError("Forbidden - Cannot edit this employee's attendance")

        entry_date = data.get("entry_date")
        if not is_iso_date(entry_date):
            raise ValidationError("Invalid entry_date; expected YYYY-MM-DD")

        old = self._entries.get(employee.id, entry_date)

        if data.get("action") == "delete":
            self._entries.delete(employee.id, entry_date)
            if old:
                self._audit.log(
                    user_id=actor.id,
                    action=AuditAction.DELETE,
                    table_name="attendance_entries",
                    record_id=old.id,
                    old_values=old.to_dict(),
                    client=client,
                )
            return

        code = str(data.get("time_code") or "").strip()
        try:
            time_code = self._time_codes.validate_time_code(code)
        except ValidationError:
            raise ValidationError("Invalid time code") from None

        raw_hours = data.get("hours")
        hours = 0.0 if raw_hours in (None, "") else require_non_negative_number(raw_hours, "hours")
        if time_code.hours_limit is not None and hours > float(time_code.hours_limit):
            raise ValidationError(f"Hours for {code} cannot exceed {float(time_code.hours_limit):g}")

        self._entries.upsert(
            employee_id=employee.id,
            entry_date=entry_date,
            time_code=code,
            time_code_id=self._time_codes.resolve_db_id(code),
            hours=hours,
            notes=data.get("notes") or None,
        )
        new = self._entries.get(employee.id, entry_date)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE if old else AuditAction.CREATE,
            table_name="attendance_entries",
            record_id=new.id if new else None,
            old_values=old.to_dict() if old else None,
            new_values=new.to_dict() if new else None,
            client=client,
        )
        logger.info("attendance_recorded", employee_id=employee.id, entry_date=entry_date, time_code=code)
