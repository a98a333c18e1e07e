from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        """Ordered by last name, then first name."""

        raise NotImplementedError

    def exists_with_number(self, employee_number: str, *, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def exists_with_email(self, email: str, *, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create(self, fields: dict) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def deactivate(self, employee_id: int) -> bool:
        raise NotImplementedError
