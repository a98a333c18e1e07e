from __future__ import annotations

import math
from datetime import date
from typing import Optional

from ...core.enums import AccrualType
from ..model import AccrualContext, AccrualResult, AccrualRule, QuarterAccrual
from .base import AccrualCalculator, eligibility_date, hours_text, not_eligible_message

PREV_Q4 = "Q4 (prev)"


def _quarter_start(year: int, quarter: dict) -> date:
    return date(year, int(quarter["startMonth"]), int(quarter["startDay"]))


def quarter_start_dates(year: int, quarters: dict) -> list[tuple[str, date]]:
    """Q1..Q4 start dates within ``year``. Q4 spans into the next year."""
    return [(name, _quarter_start(year, quarters[name])) for name in ("Q1", "Q2", "Q3", "Q4")]


class QuarterlyAccrualCalculator(AccrualCalculator):
    """Fixed hours per quarter started since eligibility, capped at maxAnnual.

    The benefit year runs from Q1's start to the end of Q4, so the December
    quarter of the previous year still counts toward the target year.
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
        max_annual = rule.max_annual or 0
        elig = eligibility_date(hire, rule.wait_period)

        if as_of < elig:
            return AccrualResult(
                accrual_type=AccrualType.QUARTERLY.value,
                is_eligible=False,
                eligibility_date=elig,
                accrued_hours=0,
                max_hours=max_annual,
                next_accrual_date=elig,
                message=not_eligible_message(elig),
            )

        if not rule.quarters:
            return AccrualResult(
                accrual_type=AccrualType.QUARTERLY.value,
                is_eligible=True,
                eligibility_date=elig,
                accrued_hours=0,
                max_hours=max_annual,
                message="No quarter definitions found.",
            )

        candidates = [(PREV_Q4, _quarter_start(target_year - 1, rule.quarters["Q4"]))]
        candidates.extend(quarter_start_dates(target_year, rule.quarters))

        benefit_year_start = _quarter_start(target_year, rule.quarters["Q1"])
        per_period = rule.hours_per_period
        cap = math.floor(max_annual / per_period) if per_period else 0

        earned_count = 0
        details: list[QuarterAccrual] = []
        next_accrual: Optional[date] = None

        for name, start in candidates:
            if name == PREV_Q4:
                if start < date(target_year - 1, 12, 1):
                    continue
            elif not (start >= benefit_year_start or (name == "Q4" and start.month == 12)):
                continue

            earned = elig <= start <= as_of
            label = name.replace(" (prev)", "")

            if earned and earned_count < cap:
                earned_count += 1
                details.append(QuarterAccrual(quarter=label, start_date=start, hours=per_period, earned=True))
            elif not earned and start > as_of and next_accrual is None:
                next_accrual = start
                details.append(QuarterAccrual(quarter=label, start_date=start, hours=per_period, earned=False))

        accrued = min(earned_count * per_period, max_annual)
        if earned_count > 0:
            message = f"{earned_count} quarter(s) earned = {hours_text(accrued)} hours"
        else:
            message = "Eligible but no quarters earned yet this year."

        return AccrualResult(
            accrual_type=AccrualType.QUARTERLY.value,
            is_eligible=True,
            eligibility_date=elig,
            accrued_hours=accrued,
            max_hours=max_annual,
            quarters_earned=earned_count,
            quarter_details=tuple(details),
            next_accrual_date=next_accrual,
            message=message,
        )
