from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from ...common.datetime_utils import format_us
from ..model import AccrualContext, AccrualResult, AccrualRule


class AccrualCalculator(ABC):
    """Calculator interface (Strategy Pattern for accrual rule types)."""

    @abstractmethod
    def calculate(
        self,
        *,
        hire: date,
        target_year: int,
        as_of: date,
        rule: AccrualRule,
        context: AccrualContext,
    ) -> AccrualResult:
        raise NotImplementedError


def _add_months(value: date, months: int) -> date:
    """Calendar month step that overflows past month end (Nov 30 + 3 months = Mar 2)."""
    year, month_index = divmod(value.year * 12 + value.month - 1 + months, 12)
    return date(year, month_index + 1, 1) + timedelta(days=value.day - 1)


def eligibility_date(hire: date, wait_period: Optional[dict]) -> date:
    """Hire date plus the wait period: years first, then months, then days.

    Year and month steps keep the day of month and roll any surplus into the
    next month, so Feb 29 + 1 year is Mar 1 and Jan 31 + 1 month is Mar 2 or 3.
    """
    wait_period = wait_period or {}
    result = hire
    if wait_period.get("years"):
        result = _add_months(result, 12 * int(wait_period["years"]))
    if wait_period.get("months"):
        result = _add_months(result, int(wait_period["months"]))
    if wait_period.get("days"):
        result = result + timedelta(days=int(wait_period["days"]))
    return result


def not_eligible_message(eligible_on: date) -> str:
    return f"Not yet eligible. Eligibility begins {format_us(eligible_on)}."


def benefit_window(period: Any, target_year: int, as_of: date) -> tuple[date, date]:
    """Start and end (inclusive) of the benefit period a rule accrues over."""
    if period == "12month":
        return as_of - relativedelta(months=12) + timedelta(days=1), as_of

    if isinstance(period, dict) and period.get("startMonth"):
        start = date(target_year, int(period["startMonth"]), int(period.get("startDay", 1)))
        end = date(target_year, int(period.get("endMonth", 12)), int(period.get("endDay", 31)))
        if end < start:
            end = date(target_year + 1, end.month, end.day)
        return start, end

    return date(target_year, 1, 1), date(target_year, 12, 31)


def earned_by_rate(hours_worked: float, rate: dict) -> float:
    """``floor(hours_worked / perHoursWorked) * earnHours``; 0 for a missing or zero rate."""
    per = float(rate.get("perHoursWorked") or 0)
    if per <= 0 or hours_worked <= 0:
        return 0
    return math.floor(hours_worked / per) * (rate.get("earnHours") or 0)


def hours_text(value: float) -> str:
    return f"{value:g}"
