from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AppSetting:
    key: str
    value: Optional[str]
    description: Optional[str] = None
    updated_by: Optional[int] = None
    updated_at: Optional[str] = None
