from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import format_iso


@dataclass(frozen=True)
class AccrualRule:
    """One entry of brand-features ``accrualCalculations.rules``.

    Type-specific settings (accrualRate, tiers, maxUsage, ...) stay in ``raw``.
    """

    type: str
    hours_per_period: float = 0
    max_annual: Optional[float] = None
    wait_period: dict = field(default_factory=dict)
    quarters: Optional[dict] = None
    period: Any = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "AccrualRule":
        eligibility = data.get("eligibility") or {}
        return cls(
            type=str(data.get("type", "")),
            hours_per_period=data.get("hoursPerPeriod") or 0,
            max_annual=data.get("maxAnnual"),
            wait_period=dict(eligibility.get("waitPeriod") or {}),
            quarters=data.get("quarters") or None,
            period=data.get("period"),
            raw=dict(data),
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)


@dataclass(frozen=True)
class AccrualContext:
    """Employee facts a calculator may need beyond the hire date."""

    hours_worked: Optional[float] = None
    scheduled_hours: Optional[float] = None
    employment_type: str = "full_time"
    is_exempt: bool = False


@dataclass(frozen=True)
class QuarterAccrual:
    quarter: str
    start_date: date
    hours: float
    earned: bool

    def to_dict(self) -> dict:
        return {
            "quarter": self.quarter,
            "startDate": format_iso(self.start_date),
            "hours": self.hours,
            "earned": self.earned,
        }


@dataclass(frozen=True)
class AccrualResult:
    accrual_type: str
    is_eligible: bool
    eligibility_date: Optional[date]
    accrued_hours: float
    max_hours: float
    message: str
    quarters_earned: int = 0
    quarter_details: tuple[QuarterAccrual, ...] = ()
    next_accrual_date: Optional[date] = None
    hours_worked_details: Optional[dict] = None
    tiered_seniority_details: Optional[dict] = None

    def to_dict(self) -> dict:
        out = {
            "accrualType": self.accrual_type,
            "isEligible": self.is_eligible,
            "eligibilityDate": format_iso(self.eligibility_date),
            "accruedHours": self.accrued_hours,
            "maxHours": self.max_hours,
            "quartersEarned": self.quarters_earned,
            "quarterDetails": [q.to_dict() for q in self.quarter_details],
            "nextAccrualDate": format_iso(self.next_accrual_date),
            "message": self.message,
        }
        if self.hours_worked_details is not None:
            out["hoursWorkedDetails"] = self.hours_worked_details
        if self.tiered_seniority_details is not None:
            out["tieredSeniorityDetails"] = self.tiered_seniority_details
        return out
