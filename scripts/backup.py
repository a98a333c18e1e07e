"""Backup the SQLite databases from the command line.

Usage: python scripts/backup.py {create,rotate,list,verify,restore,cleanup,status} [id]
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dotenv import load_dotenv

from brand_attendance.backup.manager import BackupManager
from brand_attendance.backup.utils import format_bytes
from brand_attendance.config import get_settings_module
from brand_attendance.core.constants import RETENTION_DAILY, RETENTION_MONTHLY, RETENTION_WEEKLY
from brand_attendance.core.enums import BackupType
from brand_attendance.core.exceptions import DomainError
from brand_attendance.database.connection import DBConfig


def build_manager() -> BackupManager:
    settings = importlib.import_module(get_settings_module())
    retention = getattr(settings, "BACKUP_RETENTION", {})
    return BackupManager(
        DBConfig.from_dict(dict(settings.DB_CONFIG)),
        retention_daily=int(retention.get("daily", RETENTION_DAILY)),
        retention_weekly=int(retention.get("weekly", RETENTION_WEEKLY)),
        retention_monthly=int(retention.get("monthly", RETENTION_MONTHLY)),
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage attendance database backups.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="take a backup")
    create.add_argument("--type", default=BackupType.DAILY.value, choices=[t.value for t in BackupType])
    sub.add_parser("rotate", help="promote and prune by retention")
    sub.add_parser("list", help="list backups, newest first")
    verify = sub.add_parser("verify", help="compare checksums")
    verify.add_argument("id")
    restore = sub.add_parser("restore", help="restore both databases from a backup")
    restore.add_argument("id")
    sub.add_parser("cleanup", help="drop metadata for missing files")
    sub.add_parser("status", help="storage usage and last backup")

    args = parser.parse_args(argv)
    load_dotenv(override=False)
    manager = build_manager()

    try:
        if args.command == "create":
            backup = manager.create_backup(args.type, "cli")
            print(f"OK: Backup created: {backup.id} ({format_bytes(backup.size)})")
        elif args.command == "rotate":
            print(json.dumps(manager.rotate_backups().to_dict(), indent=2))
        elif args.command == "list":
            for item in manager.list_backups():
                print(f"{item['id']:<40} {item['type']:<8} {item['timestamp']}  {format_bytes(item['totalSize'])}")
        elif args.command == "verify":
            result = manager.verify_backup(args.id)
            print(json.dumps(result, indent=2))
            return 0 if result["valid"] else 1
        elif args.command == "restore":
            result = manager.restore_backup(args.id)
            print(f"OK: Restored from {result['restoredFrom']}")
        elif args.command == "cleanup":
            orphaned = manager.cleanup()
            print(f"OK: Removed {len(orphaned)} orphaned entries")
        elif args.command == "status":
            usage = manager.storage_usage()
            last = manager.last_backup()
            print(f"Total: {format_bytes(usage['total'])}")
            for backup_type, size in usage["byType"].items():
                print(f"  {backup_type:<8} {usage['backupCount'][backup_type]:>3} backups  {format_bytes(size)}")
            print(f"Last backup: {last['id'] if last else 'none'}")
    except DomainError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
