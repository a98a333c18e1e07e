"""Seniority ordering.

Most senior first: the earliest effective hire date (rehire date when set),
then the highest seniority rank. Missing dates and ranks sort last.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, Optional

from .model import Employee


def _missing_last(a, b) -> Optional[int]:
    if a is not None and b is None:
        return -1
    if a is None and b is not None:
        return 1
    return None


def compare_by_seniority(a: Employee, b: Employee) -> int:
    date_a, date_b = a.effective_hire_date or None, b.effective_hire_date or None
    missing = _missing_last(date_a, date_b)
    if missing is not None:
        return missing
    if date_a != date_b and date_a is not None:
        return -1 if date_a < date_b else 1

    rank_a, rank_b = a.seniority_rank, b.seniority_rank
    missing = _missing_last(rank_a, rank_b)
    if missing is not None:
        return missing
    if rank_a is not None and rank_a != rank_b:
        return -1 if rank_a > rank_b else 1
    return 0


def sort_by_seniority(items: Iterable[Employee]) -> list[Employee]:
    """Stable and non-mutating."""
    return sorted(items, key=cmp_to_key(compare_by_seniority))


def seniority_position(employee: Employee, all_employees: Iterable[Employee]) -> Optional[int]:
    """1-based position of ``employee`` in seniority order, or None if absent."""
    for index, other in enumerate(sort_by_seniority(all_employees), start=1):
        if other.id == employee.id:
            return index
    return None


def has_same_effective_hire_date(a: Employee, b: Employee) -> bool:
    return (a.effective_hire_date or None) == (b.effective_hire_date or None)
