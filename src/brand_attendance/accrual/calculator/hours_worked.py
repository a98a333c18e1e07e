from __future__ import annotations

from datetime import date
from typing import Optional

from ...core.constants import HOURS_PER_DAY
from ...core.enums import AccrualType
from ..model import AccrualContext, AccrualResult, AccrualRule
from .base import AccrualCalculator, earned_by_rate, eligibility_date, hours_text, not_eligible_message


def accrual_cap(rule: AccrualRule) -> Optional[float]:
    caps = [value for value in (rule.get("maxAccrual"), rule.max_annual) if value is not None]
    return min(caps) if caps else None


def effective_usage_limit(max_usage: Optional[dict], cap: Optional[float]) -> Optional[float]:
    """Usage limit from ``{hours, days, rule}``; falls back to the accrual cap."""
    if not max_usage:
        return cap

    hours = max_usage.get("hours")
    days = max_usage.get("days")
    days_hours = days * HOURS_PER_DAY if days is not None else None
    mode = max_usage.get("rule", "fixed")

    if hours is None:
        return days_hours
    if days_hours is None or mode == "fixed":
        return hours
    if mode == "whicheverGreater":
        return max(hours, days_hours)
    if mode == "whicheverLesser":
        return min(hours, days_hours)
    return hours


class HoursWorkedAccrualCalculator(AccrualCalculator):
    """Paid sick leave style: earn N hours per M hours worked within the period."""

    def calculate(
        self,
        *,
        hire: date,
        target_year: int,
        as_of: date,
        rule: AccrualRule,
        context: AccrualContext,
    ) -> AccrualResult:
        hours_worked = float(context.hours_worked or 0)
        rate = rule.get("accrualRate") or {}
        cap = accrual_cap(rule)
        max_usage = rule.get("maxUsage")

        details = {
            "totalHoursWorked": hours_worked,
            "accrualRate": rate,
            "maxAccrual": rule.get("maxAccrual"),
            "maxUsage": max_usage,
            "effectiveUsageLimit": effective_usage_limit(max_usage, cap),
            "accrualExclusions": list(rule.get("accrualExclusions") or []),
            "hoursCountedBy": rule.get("hoursCountedBy"),
        }

        elig = eligibility_date(hire, rule.wait_period)
        if as_of < elig:
            return AccrualResult(
                accrual_type=AccrualType.HOURS_WORKED.value,
                is_eligible=False,
                eligibility_date=elig,
                accrued_hours=0,
                max_hours=cap or 0,
                next_accrual_date=elig,
                message=not_eligible_message(elig),
                hours_worked_details=details,
            )

        accrued = earned_by_rate(hours_worked, rate)
        if cap is not None:
            accrued = min(accrued, cap)

        return AccrualResult(
            accrual_type=AccrualType.HOURS_WORKED.value,
            is_eligible=True,
            eligibility_date=elig,
            accrued_hours=accrued,
            max_hours=cap or 0,
            message=f"{hours_text(accrued)} hours accrued from {hours_text(hours_worked)} hours worked",
            hours_worked_details=details,
        )
