from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Allocation


class AllocationRepository(Protocol):
    def for_employee_year(self, employee_id: int, year: int) -> Sequence[Allocation]:
        raise NotImplementedError

    def for_year(self, year: int) -> Sequence[Allocation]:
        raise NotImplementedError

    def get(self, employee_id: int, time_code: str, year: int) -> Optional[Allocation]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        time_code: str,
        time_code_id: Optional[int],
        allocated_hours: float,
        year: int,
        notes: Optional[str],
    ) -> None:
        raise NotImplementedError

    def delete(self, employee_id: int, time_code: str, year: int) -> bool:
        raise NotImplementedError
