from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AppSetting


class AppSettingsRepository(Protocol):
    def get(self, key: str) -> Optional[AppSetting]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AppSetting]:
        raise NotImplementedError

    def upsert(self, *, key: str, value: str, updated_by: Optional[int]) -> None:
        raise NotImplementedError
