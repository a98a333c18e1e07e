from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional


@dataclass
class DBConfig:
    data_dir: str
    attendance_db: str = "attendance.db"
    auth_db: str = "auth.db"

    @property
    def attendance_path(self) -> Path:
        return Path(self.data_dir) / self.attendance_db

    @property
    def auth_path(self) -> Path:
        return Path(self.data_dir) / self.auth_db

    @property
    def backups_dir(self) -> Path:
        return Path(self.data_dir) / "backups"

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            data_dir=str(db_config.get("data_dir", "databases")),
            attendance_db=str(db_config.get("attendance_db", "attendance.db")),
            auth_db=str(db_config.get("auth_db", "auth.db")),
        )


class DatabaseConnection:
    """Connection factory for one SQLite file.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    One shared instance is kept per database path.
    """

    _instances: ClassVar[dict[str, "DatabaseConnection"]] = {}

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @classmethod
    def get_instance(cls, path: str | Path) -> "DatabaseConnection":
        key = str(Path(path).resolve())
        instance: Optional[DatabaseConnection] = cls._instances.get(key)
        if instance is None:
            instance = DatabaseConnection(path)
            cls._instances[key] = instance
        return instance

    def connect(self) -> sqlite3.Connection:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._path))
        conn.row_factory = sqlite3.Row
        return conn
