from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimeCode


class TimeCodeRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[TimeCode]:
        """Ordered by code."""

        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[TimeCode]:
        raise NotImplementedError

    def insert(
        self,
        *,
        code: str,
        description: str,
        hours_limit: Optional[float],
        default_allocation: Optional[float],
        is_active: int,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        code: str,
        description: str,
        hours_limit: Optional[float],
        default_allocation: Optional[float],
        is_active: int,
    ) -> bool:
        raise NotImplementedError
