from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def entries_for_range(self, employee_id: int, start: str, end: str) -> Sequence[AttendanceEntry]:
        """Inclusive on both ends, ordered by entry_date."""

        raise NotImplementedError

    def get(self, employee_id: int, entry_date: str) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        entry_date: str,
        time_code: str,
        time_code_id: int,
        hours: float,
        notes: Optional[str],
    ) -> None:
        raise NotImplementedError

    def delete(self, employee_id: int, entry_date: str) -> bool:
        raise NotImplementedError

    def used_hours(self, *, year: int) -> dict[tuple[int, str], float]:
        """``(employee_id, time_code) -> SUM(hours)`` for entries dated in ``year``."""

        raise NotImplementedError

    def report_rows(
        self,
        *,
        start: str,
        end: str,
        employee_id: Optional[int] = None,
        time_code: Optional[str] = None,
        group_ids: Optional[Sequence[int]] = None,
    ) -> list[dict]:
        """Entries of active employees dated within [start, end], with the employee's name.

        ``group_ids`` of None means every group; otherwise employees outside
        those groups are dropped, while employees without a group stay.
        """

        raise NotImplementedError
