"""Reports: attendance detail, leave balance summary and brand report definitions."""

from __future__ import annotations

import csv
import io
from typing import Any, Callable, Optional

from ..allocations.repository import AllocationRepository
from ..attendance.repository import AttendanceRepository
from ..brands.loader import (
    BrandCatalog,
    enabled_leave_types,
    is_feature_enabled,
    is_global_read_access_enabled,
    leave_balance_summary_config,
)
from ..common.datetime_utils import today_local
from ..common.validators import require_int
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..permissions.service import PermissionService
from ..users.model import AuthUser

ALL = "all"


def _hours(value: Optional[float]) -> str:
    return "" if value is None else f"{value:g}"


def readable_group_ids(actor: AuthUser, permissions: PermissionService, brands: BrandCatalog) -> Optional[set[int]]:
    """Groups a report may show for ``actor``; None means every group.

    The actor's own group is always readable. Employees without a group are
    visible to everyone and are not covered by this set.
    """
    if permissions.is_superuser(actor.id) or is_global_read_access_enabled(brands.features()):
        return None
    readable = set(permissions.readable_groups(actor.id))
    if actor.group_id:
        readable.add(actor.group_id)
    return readable


class AttendanceReportService:
    """Time entries for a date range, optionally narrowed to one employee or code."""

    def __init__(self, entries: AttendanceRepository, permissions: PermissionService, brands: BrandCatalog):
        self._entries = entries
        self._permissions = permissions
        self._brands = brands

    def entries(
        self,
        actor: AuthUser,
        *,
        start_date: Optional[str],
        end_date: Optional[str],
        employee_id: Optional[str] = None,
        time_code: Optional[str] = None,
    ) -> list[dict]:
        if not start_date or not end_date:
            raise ValidationError("Start date and end date are required")

        employee_id = employee_id or ALL
        time_code = time_code or ALL
        groups = readable_group_ids(actor, self._permissions, self._brands)
        return self._entries.report_rows(
            start=start_date,
            end=end_date,
            employee_id=None if employee_id == ALL else require_int(employee_id, "employeeId"),
            time_code=None if time_code == ALL else time_code,
            group_ids=None if groups is None else sorted(groups),
        )


class ReportDefinitionService:
    def __init__(self, brands: BrandCatalog):
        self._brands = brands

    def get(self, report_id: str) -> dict:
        for report in self._brands.report_definitions():
            if report.get("id") == report_id:
                return report
        raise NotFoundError("Report not found")

    def available(self) -> list[dict]:
        """Definitions whose ``requiredFeature`` (if any) is enabled for the brand."""
        features = self._brands.features()
        return [
            r
            for r in self._brands.report_definitions()
            if not r.get("requiredFeature") or is_feature_enabled(features, r["requiredFeature"])
        ]


class LeaveBalanceReportService:
    def __init__(
        self,
        employees: EmployeeRepository,
        allocations: AllocationRepository,
        entries: AttendanceRepository,
        permissions: PermissionService,
        brands: BrandCatalog,
        *,
        today: Callable = today_local,
    ):
        self._employees = employees
        self._allocations = allocations
        self._entries = entries
        self._permissions = permissions
        self._brands = brands
        self._today = today

    def leave_types(self) -> list[dict]:
        features = self._brands.features()
        leave_types = (features.get("features") or {}).get("leaveManagement", {}).get("leaveTypes") or {}
        out = []
        for key in enabled_leave_types(features):
            config = leave_types.get(key) or {}
            code = config.get("timeCode")
            if code:
                out.append({"key": key, "timeCode": code, "label": config.get("label") or code})
        return out

    def visible_employees(self, actor: AuthUser) -> list[Employee]:
        employees = sorted(self._employees.list_all(), key=lambda e: (e.last_name, e.first_name))
        readable = readable_group_ids(actor, self._permissions, self._brands)
        if readable is None:
            return employees
        return [e for e in employees if e.group_id is None or e.group_id in readable]

    def summary(self, actor: AuthUser, year: Any = None) -> dict:
        config = leave_balance_summary_config(self._brands.features())
        if not config["enabled"]:
            raise AuthorizationError("Leave balance summary report is not enabled for this brand")

        target_year = require_int(year, "year") if year not in (None, "") else self._today().year
        thresholds = {
            "warningThreshold": config["warningThreshold"],
            "criticalThreshold": config["criticalThreshold"],
        }
        empty = {"employees": [], "columns": [], "config": thresholds, "year": target_year}

        leave_types = self.leave_types()
        if not leave_types:
            return empty
        employees = self.visible_employees(actor)
        if not employees:
            return empty

        # Default allocations come from the brand file only, never from the database.
        defaults = {tc.code: tc.default_allocation for tc in self._brands.time_codes() or []}
        columns = [
            {"timeCode": lt["timeCode"], "label": lt["label"], "hasAllocation": defaults.get(lt["timeCode"]) is not None}
            for lt in leave_types
        ]
        # allocation-backed columns first, usage-only after; stable within each
        columns.sort(key=lambda c: not c["hasAllocation"])

        overrides = {(a.employee_id, a.time_code): a.allocated_hours for a in self._allocations.for_year(target_year)}
        used = self._entries.used_hours(year=target_year)

        rows = []
        for employee in employees:
            balances = []
            for column in columns:
                code = column["timeCode"]
                allocated = None
                if column["hasAllocation"]:
                    allocated = overrides.get((employee.id, code), defaults.get(code))
                balances.append(
                    {
                        "timeCode": code,
                        "label": column["label"],
                        "used": used.get((employee.id, code), 0),
                        "allocated": allocated,
                        "hasAllocation": column["hasAllocation"],
                    }
                )
            rows.append({"id": employee.id, "name": employee.display_name, "balances": balances})

        return {"employees": rows, "columns": columns, "config": thresholds, "year": target_year}

    @staticmethod
    def to_csv(summary: dict) -> str:
        out = io.StringIO()
        writer = csv.writer(out)

        header = ["Employee"]
        for column in summary["columns"]:
            header.append(f"{column['label']} Used")
            if column["hasAllocation"]:
                header.extend([f"{column['label']} Allocated", f"{column['label']} Remaining"])
        writer.writerow(header)

        for row in summary["employees"]:
            line = [row["name"]]
            for balance in row["balances"]:
                line.append(_hours(balance["used"]))
                if balance["hasAllocation"]:
                    allocated = balance["allocated"]
                    remaining = None if allocated is None else allocated - balance["used"]
                    line.extend([_hours(allocated), _hours(remaining)])
            writer.writerow(line)

        return out.getvalue()
