from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dotenv import load_dotenv

from brand_attendance.config import get_settings_module
from brand_attendance.database.bootstrap import init_databases, seed_defaults, seed_demo_data
from brand_attendance.database.connection import DBConfig


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed default groups, admin user and time codes.")
    parser.add_argument("--demo", action="store_true", help="also replace employees and entries with demo rows")
    parser.add_argument("--admin-password", default="admin123")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_dict(dict(settings.DB_CONFIG))

    init_databases(db)
    seed_defaults(db, admin_password=args.admin_password)
    print(f"OK: Seeded defaults -> {db.data_dir}")

    if args.demo:
        count = seed_demo_data(db)
        print(f"OK: Demo data loaded ({count} employees)")


if __name__ == "__main__":
    main()
