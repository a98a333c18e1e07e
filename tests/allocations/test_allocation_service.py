from __future__ import annotations

from datetime import date

import pytest

from brand_attendance.allocations.service import AllocationService
from brand_attendance.audit.service import AuditService
from brand_attendance.employees.model import Employee
from brand_attendance.time_codes.model import TimeCode

V_RULE = {
    "type": "tieredSeniority",
    "period": "calendarYear",
    "eligibility": {
        "waitPeriod": {"years": 1},
        "fullTime": {"hoursThreshold": 1560},
        "exempt": {"waitPeriod": {"months": 6}},
    },
    "tiers": [
        {"minBaseYears": 1, "maxBaseYears": 5, "fullTime": {"hours": 80}, "partTime": {"earnHours": 1, "perHoursWorked": 26, "maxHours": 40}},
        {"minBaseYears": 5, "maxBaseYears": 10, "fullTime": {"hours": 120}, "partTime": {"earnHours": 1, "perHoursWorked": 17, "maxHours": 60}},
        {"minBaseYears": 10, "maxBaseYears": None, "fullTime": {"hours": 160}, "partTime": {"earnHours": 1, "perHoursWorked": 13, "maxHours": 80}},
    ],
}


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._rows = {e.id: e for e in employees}

    def get_by_id(self, employee_id: int):
        return self._rows.get(employee_id)


class NoOverrides:
    def for_employee_year(self, employee_id: int, year: int):
        return []


class NoEntries:
    def entries_for_range(self, employee_id: int, start: str, end: str):
        return []


class VacationOnly:
    def active_codes(self):
        return [TimeCode(id=1, code="V", description="Vacation", default_allocation=80)]

    def accrual_rule_for_time_code(self, code: str):
        return V_RULE if code == "V" else None


class InMemoryAudit:
    def insert(self, **row) -> int:
        return 1


def _vacation(employee: Employee, today: date) -> dict:
    codes = VacationOnly()
    service = AllocationService(
        NoOverrides(),
        InMemoryEmployees([employee]),
        NoEntries(),
        codes,
        codes,
        AuditService(InMemoryAudit()),
        today=lambda: today,
    )
    return service.allocations_for(employee.id, today.year)["allocations"][0]


def test_mid_year_full_time_gets_the_whole_tier():
    employee = Employee(id=1, first_name="Ana", last_name="Ruiz", date_of_hire="2019-01-07")

    vacation = _vacation(employee, date(2026, 6, 30))

    assert vacation["allocated_hours"] == 120
    details = vacation["accrual_details"]["tieredSeniorityDetails"]
    assert details["isFullTimeQualified"] is True
    assert details["scheduledHours"] == 2088


def test_rehired_employee_counts_seniority_from_rehire_date():
    employee = Employee(
        id=1, first_name="Ana", last_name="Ruiz", date_of_hire="2010-01-04", rehire_date="2025-09-01"
    )

    vacation = _vacation(employee, date(2026, 12, 31))

    details = vacation["accrual_details"]
    assert details["eligibilityDate"] == "2026-09-01"
    assert details["tieredSeniorityDetails"]["baseYears"] == 1
    assert vacation["allocated_hours"] == 80


@pytest.mark.parametrize("is_exempt, expected", [(True, 160), (False, 80)])
def test_exempt_flag_reaches_the_tier_calculation(is_exempt, expected):
    employee = Employee(
        id=1,
        first_name="Ana",
        last_name="Ruiz",
        date_of_hire="2015-03-02",
        employment_type="part_time",
        is_exempt=is_exempt,
    )

    vacation = _vacation(employee, date(2026, 12, 31))

    assert vacation["allocated_hours"] == expected
