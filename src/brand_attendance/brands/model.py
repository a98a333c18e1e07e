from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BrandTimeCode:
    """One entry of <brand>/time-codes.json."""

    id: int
    code: str
    description: str
    hours_limit: Optional[float]
    default_allocation: Optional[float]
    is_active: int = 1
    color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BrandTimeCode":
        return cls(
            id=int(data["id"]),
            code=str(data["code"]),
            description=str(data.get("description", "")),
            hours_limit=data.get("hours_limit"),
            default_allocation=data.get("default_allocation"),
            is_active=int(data.get("is_active", 1)),
            color=data.get("color"),
        )


@dataclass(frozen=True)
class BrandConfig:
    id: str
    name: str
    logo_path: str
    logo_alt: str
    app_title: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "logoPath": self.logo_path,
            "logoAlt": self.logo_alt,
            "appTitle": self.app_title,
        }
