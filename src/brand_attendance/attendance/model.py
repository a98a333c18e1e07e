from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one day of recorded time for one employee."""

    id: int
    employee_id: int
    entry_date: str
    time_code: str
    hours: float
    time_code_id: int = 0
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
