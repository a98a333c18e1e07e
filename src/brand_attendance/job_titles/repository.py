from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import JobTitle


class JobTitleRepository(Protocol):
    def list_active(self) -> Sequence[JobTitle]:
        raise NotImplementedError

    def get_by_id(self, job_title_id: int) -> Optional[JobTitle]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[JobTitle]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, job_title_id: int, fields: dict) -> bool:
        raise NotImplementedError
