from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee row of attendance.db.

    Dates are kept as the ISO strings SQLite stores.
    """

    id: int
    first_name: str
    last_name: str
    employee_number: Optional[str] = None
    email: Optional[str] = None
    role: str = "employee"
    group_id: Optional[int] = None
    date_of_hire: Optional[str] = None
    rehire_date: Optional[str] = None
    employment_type: str = "full_time"
    seniority_rank: Optional[int] = None
    is_exempt: bool = False
    created_by: Optional[int] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def effective_hire_date(self) -> Optional[str]:
        return self.rehire_date or self.date_of_hire

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_active"] = 1 if self.is_active else 0
        data["is_exempt"] = 1 if self.is_exempt else 0
        return data


# Columns a PUT may touch; anything else in the body is ignored.
UPDATABLE_FIELDS = (
    "employee_number",
    "first_name",
    "last_name",
    "email",
    "role",
    "group_id",
    "date_of_hire",
    "rehire_date",
    "employment_type",
    "seniority_rank",
    "is_exempt",
    "is_active",
)
