from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional, Union

from ..attendance.model import AttendanceEntry
from ..common.datetime_utils import as_date
from ..core.constants import DEFAULT_WEEKLY_HOURS
from ..core.enums import AccrualType, EmploymentType
from ..employees.model import Employee
from .factory import AccrualCalculatorFactory
from .model import AccrualContext, AccrualResult, AccrualRule

RuleLike = Union[AccrualRule, dict]
DateLike = Union[date, str]


def _as_rule(rule: RuleLike) -> AccrualRule:
    return rule if isinstance(rule, AccrualRule) else AccrualRule.from_dict(rule)


def uses_hours_worked(rule: RuleLike) -> bool:
    return _as_rule(rule).type in {AccrualType.HOURS_WORKED.value, AccrualType.TIERED_SENIORITY.value}


def calculate_accrual(
    hire: DateLike,
    target_year: int,
    as_of: DateLike,
    rule: RuleLike,
    *,
    hours_worked: Optional[float] = None,
    scheduled_hours: Optional[float] = None,
    employment_type: str = EmploymentType.FULL_TIME.value,
    is_exempt: bool = False,
    factory: Optional[AccrualCalculatorFactory] = None,
) -> AccrualResult:
    """Accrued hours for ``target_year`` as of ``as_of`` under a brand rule.

    Pure: the same inputs always give the same result.
    """
    rule = _as_rule(rule)
    calculator = (factory or AccrualCalculatorFactory()).for_rule(rule)
    if calculator is None:
        return AccrualResult(
            accrual_type=rule.type,
            is_eligible=False,
            eligibility_date=None,
            accrued_hours=0,
            max_hours=rule.max_annual or 0,
            message=f"Unsupported accrual type: {rule.type}",
        )

    return calculator.calculate(
        hire=as_date(hire),
        target_year=int(target_year),
        as_of=as_date(as_of),
        rule=rule,
        context=AccrualContext(
            hours_worked=hours_worked,
            scheduled_hours=scheduled_hours,
            employment_type=employment_type,
            is_exempt=is_exempt,
        ),
    )


def _working_days(start: date, end: date) -> int:
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def _daily_hours(employee: Employee, rule: AccrualRule) -> float:
    counted_by = rule.get("hoursCountedBy") or {}
    exempt_full_time = counted_by.get("exemptFullTime") if isinstance(counted_by, dict) else None
    weekly = (exempt_full_time or {}).get("assumedWeeklyHours") or DEFAULT_WEEKLY_HOURS
    daily = weekly / 5
    if employee.employment_type == EmploymentType.PART_TIME.value:
        daily = daily / 2
    return daily


def _counting_start(employee: Employee, window_start: date) -> date:
    if employee.effective_hire_date:
        return max(window_start, as_date(employee.effective_hire_date))
    return window_start


def scheduled_hours(employee: Employee, window_start: date, window_end: date, rule: RuleLike) -> float:
    """Weekday hours the employee is scheduled for across the whole window."""
    rule = _as_rule(rule)
    start = _counting_start(employee, window_start)
    if start > window_end:
        return 0
    return _working_days(start, window_end) * _daily_hours(employee, rule)


def estimate_hours_worked(
    employee: Employee,
    window_start: date,
    window_end: date,
    entries: Iterable[AttendanceEntry],
    rule: RuleLike,
) -> float:
    """Scheduled weekday hours in the window minus excluded time off.

    Counting starts at the later of the window start and the effective hire
    date. Part-time employees are scheduled for half the full-time day.
    """
    rule = _as_rule(rule)
    start = _counting_start(employee, window_start)
    total = scheduled_hours(employee, window_start, window_end, rule)
    if not total:
        return 0

    excluded = set(rule.get("accrualExclusions") or [])
    if excluded:
        lo, hi = start.isoformat(), window_end.isoformat()
        total -= sum(
            float(e.hours or 0)
            for e in entries
            if e.time_code in excluded and lo <= e.entry_date <= hi
        )

    return max(total, 0)
