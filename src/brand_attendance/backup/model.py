from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DATABASE_NAMES = ("attendance", "auth")


@dataclass(frozen=True)
class BackupFile:
    filename: str
    size: int
    checksum: str

    def to_dict(self) -> dict:
        return {"filename": self.filename, "size": self.size, "checksum": self.checksum}

    @classmethod
    def from_dict(cls, data: dict) -> "BackupFile":
        return cls(filename=str(data["filename"]), size=int(data.get("size") or 0), checksum=str(data.get("checksum") or ""))


@dataclass(frozen=True)
class BackupMetadata:
    """One backup set: a copy of attendance.db and auth.db taken together."""

    id: str
    type: str
    timestamp: str
    databases: dict[str, BackupFile] = field(default_factory=dict)
    promoted_from: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def size(self) -> int:
        return sum(f.size for f in self.databases.values())

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "timestamp": self.timestamp,
            "databases": {name: f.to_dict() for name, f in self.databases.items()},
        }
        if self.promoted_from:
            data["promotedFrom"] = self.promoted_from
        if self.created_by:
            data["createdBy"] = self.created_by
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "BackupMetadata":
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            timestamp=str(data["timestamp"]),
            databases={name: BackupFile.from_dict(f) for name, f in (data.get("databases") or {}).items()},
            promoted_from=data.get("promotedFrom"),
            created_by=data.get("createdBy"),
        )


@dataclass
class RotationResult:
    promoted: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"promoted": self.promoted, "deleted": self.deleted, "errors": self.errors}
