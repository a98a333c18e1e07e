from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TimeCode:
    """Domain entity: a row of attendance.db time_codes."""

    id: int
    code: str
    description: str
    hours_limit: Optional[float] = None
    default_allocation: Optional[float] = None
    is_active: int = 1
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "hours_limit": self.hours_limit,
            "default_allocation": self.default_allocation,
            "is_active": self.is_active,
        }
