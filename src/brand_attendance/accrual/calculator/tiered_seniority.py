from __future__ import annotations

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from ...core.constants import DEFAULT_FULL_TIME_HOURS_THRESHOLD
from ...core.enums import AccrualType, EmploymentType
from ..model import AccrualContext, AccrualResult, AccrualRule
from .base import (
    AccrualCalculator,
    benefit_window,
    earned_by_rate,
    eligibility_date,
    hours_text,
    not_eligible_message,
)


def base_years(hire: date, as_of: date) -> int:
    """Whole years of service from hire to as_of."""
    if as_of < hire:
        return 0
    return relativedelta(as_of, hire).years


def select_tier(tiers: list[dict], years: int) -> Optional[dict]:
    for tier in tiers:
        min_years = tier.get("minBaseYears", 0)
        max_years = tier.get("maxBaseYears")
        if min_years <= years and (max_years is None or years < max_years):
            return tier
    return None


def tier_label(tier: dict) -> str:
    max_years = tier.get("maxBaseYears")
    if max_years is None:
        return f"{tier.get('minBaseYears', 0)}+"
    return f"{tier.get('minBaseYears', 0)}-{max_years}"


def employee_type_key(context: AccrualContext) -> str:
    if context.is_exempt:
        return "exempt"
    if context.employment_type == EmploymentType.PART_TIME.value:
        return "partTime"
    return "fullTime"


def part_time_hours(tier: dict, hours_worked: float) -> float:
    part_time = tier.get("partTime") or {}
    earned = earned_by_rate(hours_worked, part_time)
    max_hours = part_time.get("maxHours")
    return min(earned, max_hours) if max_hours is not None else earned


class TieredSeniorityAccrualCalculator(AccrualCalculator):
    """Vacation style: hours per benefit period by years of service.

    Full-time employees under the hours threshold and part-time employees are
    prorated by hours worked; exempt employees always get the full tier.
    Full-time qualification compares the threshold with the hours scheduled
    across the whole benefit period when the caller supplies them.
    """

    def calculate(
        self,
        *,
        hire: date,
        target_year: int,
        as_of: date,
        rule: AccrualRule,
        context: AccrualContext,
    ) -> AccrualResult:
        eligibility = rule.get("eligibility") or {}
        hours_worked = float(context.hours_worked or 0)
        years = base_years(hire, as_of)
        tier = select_tier(list(rule.get("tiers") or []), years)
        employee_type = employee_type_key(context)
        period_start, period_end = benefit_window(rule.period or "calendarYear", target_year, as_of)
        threshold = (eligibility.get("fullTime") or {}).get("hoursThreshold", DEFAULT_FULL_TIME_HOURS_THRESHOLD)

        if employee_type == "exempt":
            wait_period = (eligibility.get("exempt") or {}).get("waitPeriod") or rule.wait_period
        else:
            wait_period = rule.wait_period

        scheduled = hours_worked if context.scheduled_hours is None else float(context.scheduled_hours)
        qualified = employee_type == "exempt" or (employee_type == "fullTime" and scheduled >= threshold)
        max_hours = ((tier or {}).get("fullTime") or {}).get("hours") or 0

        details = {
            "baseYears": years,
            "currentTier": tier,
            "employeeType": employee_type,
            "periodStart": period_start.isoformat(),
            "periodEnd": period_end.isoformat(),
            "hoursThreshold": threshold,
            "estimatedHoursWorked": hours_worked,
            "scheduledHours": scheduled,
            "isFullTimeQualified": qualified,
            "notes": rule.get("notes"),
        }

        elig = eligibility_date(hire, wait_period)
        if as_of < elig:
            return AccrualResult(
                accrual_type=AccrualType.TIERED_SENIORITY.value,
                is_eligible=False,
                eligibility_date=elig,
                accrued_hours=0,
                max_hours=max_hours,
                next_accrual_date=elig,
                message=not_eligible_message(elig),
                tiered_seniority_details=details,
            )

        if tier is None:
            return AccrualResult(
                accrual_type=AccrualType.TIERED_SENIORITY.value,
                is_eligible=True,
                eligibility_date=elig,
                accrued_hours=0,
                max_hours=0,
                message=f"No tier for {years} years of service",
                tiered_seniority_details=details,
            )

        if qualified:
            accrued = max_hours
        else:
            accrued = part_time_hours(tier, hours_worked)
            if max_hours:
                accrued = min(accrued, max_hours)

        return AccrualResult(
            accrual_type=AccrualType.TIERED_SENIORITY.value,
            is_eligible=True,
            eligibility_date=elig,
            accrued_hours=accrued,
            max_hours=max_hours,
            message=f"Tier {tier_label(tier)} years: {hours_text(accrued)} hours",
            tiered_seniority_details=details,
        )
