from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AccrualType
from .calculator.base import AccrualCalculator
from .calculator.hours_worked import HoursWorkedAccrualCalculator
from .calculator.quarterly import QuarterlyAccrualCalculator
from .calculator.tiered_seniority import TieredSeniorityAccrualCalculator
from .model import AccrualRule


@dataclass
class AccrualCalculatorFactory:
    """Factory Pattern: choose the calculator for a rule type."""

    def for_rule(self, rule: AccrualRule) -> Optional[AccrualCalculator]:
        if rule.type == AccrualType.QUARTERLY.value:
            return QuarterlyAccrualCalculator()
        if rule.type == AccrualType.HOURS_WORKED.value:
            return HoursWorkedAccrualCalculator()
        if rule.type == AccrualType.TIERED_SENIORITY.value:
            return TieredSeniorityAccrualCalculator()
        # monthly / annual are declared by brands but not calculated yet.
        return None
