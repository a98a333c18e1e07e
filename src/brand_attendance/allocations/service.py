from __future__ import annotations

from typing import Any, Callable, Optional

import structlog

from ..accrual.calculator.base import benefit_window
from ..accrual.model import AccrualRule
from ..accrual.service import calculate_accrual, estimate_hours_worked, scheduled_hours, uses_hours_worked
from ..attendance.repository import AttendanceRepository
from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..brands.loader import BrandCatalog
from ..common.datetime_utils import today_local
from ..common.validators import require_int, require_non_negative_number
from ..core.enums import AccrualType, AuditAction
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..time_codes.service import TimeCodeService
from ..users.model import AuthUser
from .repository import AllocationRepository

logger = structlog.get_logger(__name__)


class AllocationService:
    """Use case: yearly hours per time code, from defaults, overrides or accrual rules."""

    def __init__(
        self,
        allocations: AllocationRepository,
        employees: EmployeeRepository,
        entries: AttendanceRepository,
        time_codes: TimeCodeService,
        brands: BrandCatalog,
        audit: AuditService,
        *,
        today: Callable = today_local,
    ):
        self._allocations = allocations
        self._employees = employees
        self._entries = entries
        self._time_codes = time_codes
        self._brands = brands
        self._audit = audit
        self._today = today

    @staticmethod
    def _require_editor(actor: AuthUser) -> None:
        if not actor.can_edit_all:
            raise AuthorizationError("Forbidden: You do not have permission to modify allocations")

    def _hours_worked(self, employee: Employee, rule: AccrualRule, year: int) -> tuple[float, float]:
        """Hours worked so far in the benefit period, and hours scheduled across all of it."""
        as_of = self._today()
        start, end = benefit_window(rule.period, year, as_of)
        scheduled = scheduled_hours(employee, start, end, rule)
        end = min(end, as_of)
        if start > end:
            return 0, scheduled
        entries = self._entries.entries_for_range(employee.id, start.isoformat(), end.isoformat())
        return estimate_hours_worked(employee, start, end, entries, rule), scheduled

    def _accrual(self, employee: Employee, rule_data: dict, year: int) -> dict:
        rule = AccrualRule.from_dict(rule_data)
        hours_worked = scheduled = None
        if uses_hours_worked(rule):
            hours_worked, scheduled = self._hours_worked(employee, rule, year)
        # Seniority tiers count from the most recent hire; other rules from the original hire.
        if rule.type == AccrualType.TIERED_SENIORITY.value:
            hire = employee.effective_hire_date
        else:
            hire = employee.date_of_hire
        result = calculate_accrual(
            hire,
            year,
            self._today(),
            rule,
            hours_worked=hours_worked,
            scheduled_hours=scheduled,
            employment_type=employee.employment_type,
            is_exempt=employee.is_exempt,
        )
        return result.to_dict()

    def allocations_for(self, employee_id: Any, year: Any = None) -> dict:
        if employee_id in (None, ""):
            raise ValidationError("Employee ID is required")
        employee_id = require_int(employee_id, "Employee ID")
        target_year = require_int(year, "year") if year not in (None, "") else self._today().year

        employee = self._employees.get_by_id(employee_id)
        hire_date = employee.date_of_hire if employee else None
        overrides = {a.time_code_id: a for a in self._allocations.for_employee_year(employee_id, target_year)}

        allocations = []
        for tc in self._time_codes.active_codes():
            override = overrides.get(tc.id)
            rule = self._brands.accrual_rule_for_time_code(tc.code)
            allocated = override.allocated_hours if override else tc.default_allocation
            details = None
            if rule and hire_date:
                details = self._accrual(employee, rule, target_year)
                allocated = details["accruedHours"]

            allocations.append(
                {
                    "time_code": tc.code,
                    "time_code_id": tc.id,
                    "description": tc.description,
                    "default_allocation": tc.default_allocation,
                    "allocated_hours": allocated,
                    "is_override": bool(override) and not rule,
                    "is_accrual": bool(rule),
                    "accrual_details": details,
                    "notes": override.notes if override else None,
                }
            )

        return {"employee_id": employee_id, "year": target_year, "hire_date": hire_date, "allocations": allocations}

    def set_allocation(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> None:
        self._require_editor(actor)
        if (
            not data.get("employee_id")
            or not data.get("time_code")
            or data.get("allocated_hours") is None
            or not data.get("year")
        ):
            raise ValidationError("Missing required fields")

        employee_id = require_int(data["employee_id"], "employee_id")
        year = require_int(data["year"], "year")
        code = str(data["time_code"])
        hours = require_non_negative_number(data["allocated_hours"], "allocated_hours")
        time_code = self._time_codes.find(code)
        if time_code is None:
            raise ValidationError("Invalid time code")

        old = self._allocations.get(employee_id, code, year)
        self._allocations.upsert(
            employee_id=employee_id,
            time_code=code,
            time_code_id=time_code.id,
            allocated_hours=hours,
            year=year,
            notes=data.get("notes") or None,
        )
        new = self._allocations.get(employee_id, code, year)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE if old else AuditAction.CREATE,
            table_name="employee_time_allocations",
            record_id=new.id if new else None,
            old_values=old.to_dict() if old else None,
            new_values=new.to_dict() if new else None,
            client=client,
        )
        logger.info("allocation_set", employee_id=employee_id, time_code=code, year=year, hours=hours)

    def revert_to_default(
        self,
        actor: AuthUser,
        *,
        employee_id: Any,
        time_code: Optional[str],
        year: Any,
        client: Optional[ClientInfo] = None,
    ) -> None:
        self._require_editor(actor)
        if not employee_id or not time_code or not year:
            raise ValidationError("Missing required parameters")
        employee_id = require_int(employee_id, "employeeId")
        year = require_int(year, "year")

        old = self._allocations.get(employee_id, time_code, year)
        self._allocations.delete(employee_id, time_code, year)
        if old:
            self._audit.log(
                user_id=actor.id,
                action=AuditAction.DELETE,
                table_name="employee_time_allocations",
                record_id=old.id,
                old_values=old.to_dict(),
                client=client,
            )
