from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Allocation:
    """Domain entity: a per-employee, per-year override of a time code's default hours."""

    id: int
    employee_id: int
    time_code: str
    allocated_hours: float
    year: int
    time_code_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
