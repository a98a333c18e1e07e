from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Callable, Sequence

import structlog

from .connection import DatabaseConnection

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Migration:
    name: str
    description: str
    up: Callable[[sqlite3.Connection], None]


def column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return any(row[1] == column for row in rows)


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,),
    ).fetchone()
    return row is not None


def applied_migrations(conn: sqlite3.Connection) -> list[str]:
    if not table_exists(conn, "migrations"):
        return []
    return [row[0] for row in conn.execute("SELECT name FROM migrations ORDER BY id").fetchall()]


def run_migrations(conn_factory: DatabaseConnection, migrations: Sequence[Migration], *, db_name: str) -> list[str]:
    """Apply pending migrations in order; returns the names that ran.

    Each migration commits together with its tracking row, so a failure leaves
    earlier migrations recorded and the failing one absent.
    """
    conn = conn_factory.connect()
    applied_now: list[str] = []
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                description TEXT,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        conn.commit()
        done = set(applied_migrations(conn))

        for migration in migrations:
            if migration.name in done:
                continue
            logger.info("migration_running", db=db_name, migration=migration.name)
            try:
                migration.up(conn)
                conn.execute(
                    "INSERT INTO migrations (name, description) VALUES (?, ?)",
                    (migration.name, migration.description),
                )
                conn.commit()
            except Exception:
                conn.rollback()
                logger.exception("migration_failed", db=db_name, migration=migration.name)
                raise
            applied_now.append(migration.name)

        if applied_now:
            logger.info("migrations_applied", db=db_name, count=len(applied_now))
        return applied_now
    finally:
        conn.close()


# -- auth.db ---------------------------------------------------------------

DEFAULT_ROLES = [
    (1, "Administrator", "Full system access with all permissions", 1, 1, 1, 1, 1, 1),
    (2, "Manager", "Full CRUD access to assigned groups and employees", 1, 1, 1, 1, 0, 0),
    (3, "Editor", "Can create, read, and update records (no delete)", 1, 1, 1, 0, 0, 0),
    (4, "Contributor", "Can create and read records only", 1, 1, 0, 0, 0, 0),
    (5, "Viewer", "Read-only access to assigned groups", 0, 1, 0, 0, 0, 0),
    (6, "Self-Service", "Can only view and edit own attendance records", 1, 1, 1, 0, 0, 0),
]

DEFAULT_JOB_TITLES = [
    ("Employee", "General employee"),
    ("Supervisor", "Team supervisor"),
    ("Manager", "Department manager"),
    ("Director", "Division director"),
    ("Administrator", "System administrator"),
    ("HR Specialist", "Human resources specialist"),
    ("Accountant", "Financial accountant"),
    ("Technician", "Technical specialist"),
    ("Engineer", "Engineering professional"),
    ("Analyst", "Business or data analyst"),
    ("Coordinator", "Project or team coordinator"),
    ("Assistant", "Administrative assistant"),
    ("Consultant", "External consultant"),
    ("Specialist", "Subject matter specialist"),
    ("Contractor", "Contract worker"),
    ("Intern", "Internship position"),
    ("Other", "Other job title"),
]


def _add_superuser(conn: sqlite3.Connection) -> None:
    if not column_exists(conn, "users", "is_superuser"):
        conn.execute("ALTER TABLE users ADD COLUMN is_superuser INTEGER DEFAULT 0")
    conn.execute(
        """
        UPDATE users SET is_superuser = 1
        WHERE group_id IN (SELECT id FROM groups WHERE is_master = 1)
        """
    )


def _user_group_permissions(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS user_group_permissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            group_id INTEGER NOT NULL,
            can_create INTEGER DEFAULT 0,
            can_read INTEGER DEFAULT 1,
            can_update INTEGER DEFAULT 0,
            can_delete INTEGER DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(user_id, group_id),
            FOREIGN KEY (user_id) REFERENCES users(id),
            FOREIGN KEY (group_id) REFERENCES groups(id)
        )
        """
    )


def _user_preferences(conn: sqlite3.Connection) -> None:
    if not column_exists(conn, "users", "color_mode"):
        conn.execute("ALTER TABLE users ADD COLUMN color_mode TEXT DEFAULT 'system'")
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS app_settings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            key TEXT UNIQUE NOT NULL,
            value TEXT,
            description TEXT,
            updated_by INTEGER,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        """
    )


def _roles(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS roles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            description TEXT,
            can_create INTEGER DEFAULT 0,
            can_read INTEGER DEFAULT 1,
            can_update INTEGER DEFAULT 0,
            can_delete INTEGER DEFAULT 0,
            can_manage_users INTEGER DEFAULT 0,
            can_access_all_groups INTEGER DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.executemany(
        """
        INSERT OR IGNORE INTO roles
            (id, name, description, can_create, can_read, can_update, can_delete,
             can_manage_users, can_access_all_groups)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        DEFAULT_ROLES,
    )
    if not column_exists(conn, "users", "role_id"):
        conn.execute("ALTER TABLE users ADD COLUMN role_id INTEGER REFERENCES roles(id)")
    conn.execute("UPDATE users SET role_id = 1 WHERE is_superuser = 1")
    conn.execute("UPDATE users SET role_id = 2 WHERE is_superuser = 0 OR is_superuser IS NULL")


def _job_titles(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS job_titles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            description TEXT,
            is_active INTEGER DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.executemany("INSERT OR IGNORE INTO job_titles (name, description) VALUES (?, ?)", DEFAULT_JOB_TITLES)


def _employee_link(conn: sqlite3.Connection) -> None:
    if not column_exists(conn, "users", "employee_id"):
        conn.execute("ALTER TABLE users ADD COLUMN employee_id INTEGER")


AUTH_MIGRATIONS: list[Migration] = [
    Migration("001_add_superuser", "Add is_superuser to users; promote master-group users", _add_superuser),
    Migration("002_user_group_permissions", "Per-user CRUD permissions on groups", _user_group_permissions),
    Migration("003_user_preferences", "User color mode and global app settings", _user_preferences),
    Migration("004_roles", "Role table with default roles; users.role_id", _roles),
    Migration("005_job_titles", "Job titles with default rows", _job_titles),
    Migration("006_employee_link", "Link users to an employee record", _employee_link),
]


# -- attendance.db ---------------------------------------------------------


def _employee_phase5_fields(conn: sqlite3.Connection) -> None:
    if not column_exists(conn, "employees", "rehire_date"):
        conn.execute("ALTER TABLE employees ADD COLUMN rehire_date TEXT")
    if not column_exists(conn, "employees", "employment_type"):
        conn.execute("ALTER TABLE employees ADD COLUMN employment_type TEXT DEFAULT 'full_time'")
    if not column_exists(conn, "employees", "seniority_rank"):
        conn.execute("ALTER TABLE employees ADD COLUMN seniority_rank INTEGER")


def _employee_exempt_flag(conn: sqlite3.Connection) -> None:
    if not column_exists(conn, "employees", "is_exempt"):
        conn.execute("ALTER TABLE employees ADD COLUMN is_exempt INTEGER DEFAULT 0")


ATTENDANCE_MIGRATIONS: list[Migration] = [
    Migration(
        "001_employee_phase5_fields",
        "Rehire date, employment type and seniority rank on employees",
        _employee_phase5_fields,
    ),
    Migration("002_employee_exempt_flag", "Exempt flag on employees", _employee_exempt_flag),
]
