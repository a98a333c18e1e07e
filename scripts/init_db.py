from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dotenv import load_dotenv

from brand_attendance.config import get_settings_module
from brand_attendance.database.bootstrap import init_databases, list_tables, seed_defaults
from brand_attendance.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_dict(dict(settings.DB_CONFIG))

    applied = init_databases(db)
    seed_defaults(db)

    for name, path in (("attendance", db.attendance_path), ("auth", db.auth_path)):
        tables = list_tables(DatabaseConnection.get_instance(path))
        print(f"OK: {name} -> {path} (tables={len(tables)}, new migrations={len(applied[name])})")
        for table in tables:
            print(f"  - {table}")


if __name__ == "__main__":
    main()
