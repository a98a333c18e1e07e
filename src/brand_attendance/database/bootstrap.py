from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import structlog
from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .migrations import ATTENDANCE_MIGRATIONS, AUTH_MIGRATIONS, run_migrations
from .sqlite_base import db_cursor

logger = structlog.get_logger(__name__)

SQL_DIR = Path(__file__).resolve().parent / "sql"

DEFAULT_GROUPS = [
    (1, "Master", "Full access to all groups", 1, 1, 1),
    (2, "Managers", "Can view all groups", 0, 1, 0),
    (3, "HR", "Human resources", 0, 1, 1),
    (4, "Employees", "Regular employees", 0, 0, 0),
]

# code, description, hours_limit, default_allocation
DEFAULT_TIME_CODES = [
    ("D", "Discipline", None, None),
    ("B", "Bereavement", 24, 24),
    ("FE", "Family Emergency", None, None),
    ("FM", "FMLA", None, None),
    ("H", "Holiday", None, None),
    ("JD", "Jury Duty", None, None),
    ("FH", "Floating Holiday", 24, 24),
    ("DP", "Designated Person", None, None),
    ("P", "Personal", None, 40),
    ("LOW", "Lack of Work", None, None),
    ("PS", "Personal Sick Day", 40, 40),
    ("T", "Tardy", None, None),
    ("V", "Vacation", None, 80),
    ("WC", "Workers Comp", None, None),
]

# employee_number, first, last, email, group_id, hire, rehire, employment_type, seniority_rank
DEMO_EMPLOYEES = [
    ("E1001", "Alice", "Johnson", "alice.johnson@example.com", 2, "2015-03-02", None, "full_time", 5),
    ("E1002", "Brian", "Lee", "brian.lee@example.com", 3, "2018-06-18", None, "full_time", 3),
    ("E1003", "Carmen", "Diaz", "carmen.diaz@example.com", 4, "2021-01-11", None, "part_time", None),
    ("E1004", "Derek", "Owens", "derek.owens@example.com", 4, "2012-09-04", "2020-02-03", "full_time", 2),
    ("E1005", "Elena", "Petrova", "elena.petrova@example.com", 4, "2023-08-21", None, "full_time", None),
    ("E1006", "Farid", "Khan", "farid.khan@example.com", None, "2019-11-25", None, "part_time", 1),
]


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    sql = Path(schema_path).read_text(encoding="utf-8")
    conn = conn_factory.connect()
    try:
        conn.executescript(sql)
        conn.commit()
    finally:
        conn.close()


def init_databases(db: DBConfig) -> dict[str, list[str]]:
    """Create both databases and bring them up to the latest migration."""
    attendance = DatabaseConnection.get_instance(db.attendance_path)
    auth = DatabaseConnection.get_instance(db.auth_path)

    apply_schema(attendance, schema_path=SQL_DIR / "attendance_schema.sql")
    apply_schema(auth, schema_path=SQL_DIR / "auth_schema.sql")

    return {
        "attendance": run_migrations(attendance, ATTENDANCE_MIGRATIONS, db_name="attendance"),
        "auth": run_migrations(auth, AUTH_MIGRATIONS, db_name="auth"),
    }


def seed_defaults(db: DBConfig, *, admin_password: str = "admin123") -> None:
    """Default groups, admin user and time codes. Existing rows are left untouched."""
    auth = DatabaseConnection.get_instance(db.auth_path)
    attendance = DatabaseConnection.get_instance(db.attendance_path)

    with db_cursor(auth) as (_, cur):
        cur.executemany(
            """
            INSERT OR IGNORE INTO groups (id, name, description, is_master, can_view_all, can_edit_all)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            DEFAULT_GROUPS,
        )
        cur.execute("SELECT id FROM users WHERE username = ?", ("admin",))
        if cur.fetchone() is None:
            cur.execute(
                """
                INSERT INTO users (username, password_hash, full_name, email, group_id, is_active, is_superuser, role_id)
                VALUES (?, ?, ?, ?, 1, 1, 1, 1)
                """,
                ("admin", generate_password_hash(admin_password), "System Administrator", "admin@example.com"),
            )
            logger.info("admin_user_created", username="admin")

    with db_cursor(attendance) as (_, cur):
        cur.executemany(
            """
            INSERT OR IGNORE INTO time_codes (code, description, hours_limit, default_allocation, is_active)
            VALUES (?, ?, ?, ?, 1)
            """,
            DEFAULT_TIME_CODES,
        )


def seed_demo_data(db: DBConfig, *, today: date | None = None) -> int:
    """Replace employees, entries and allocations with a fixed demo set. Returns employee count."""
    today = today or date.today()
    attendance = DatabaseConnection.get_instance(db.attendance_path)

    with db_cursor(attendance) as (_, cur):
        cur.execute("DELETE FROM attendance_entries")
        cur.execute("DELETE FROM employee_time_allocations")
        cur.execute("DELETE FROM employees")

        ids: list[int] = []
        for number, first, last, email, group_id, hire, rehire, employment_type, rank in DEMO_EMPLOYEES:
            cur.execute(
                """
                INSERT INTO employees
                    (employee_number, first_name, last_name, email, role, group_id, date_of_hire,
                     rehire_date, employment_type, seniority_rank, created_by, is_active)
                VALUES (?, ?, ?, ?, 'employee', ?, ?, ?, ?, ?, 1, 1)
                """,
                (number, first, last, email, group_id, hire, rehire, employment_type, rank),
            )
            ids.append(int(cur.lastrowid))

        cur.execute("SELECT id, code FROM time_codes")
        code_ids = {row["code"]: int(row["id"]) for row in cur.fetchall()}

        # A few recent weekday absences per employee.
        day = today - timedelta(days=1)
        pattern = ["V", "PS", "FH", "P"]
        for index, employee_id in enumerate(ids):
            used = 0
            cursor_day = day - timedelta(days=index * 3)
            while used < 2:
                if cursor_day.weekday() < 5:
                    code = pattern[(index + used) % len(pattern)]
                    cur.execute(
                        """
                        INSERT OR IGNORE INTO attendance_entries (employee_id, entry_date, time_code, time_code_id, hours)
                        VALUES (?, ?, ?, ?, 8)
                        """,
                        (employee_id, cursor_day.isoformat(), code, code_ids.get(code, 0)),
                    )
                    used += 1
                cursor_day -= timedelta(days=1)

    logger.info("demo_data_seeded", employees=len(ids))
    return len(ids)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name")
        return [row[0] for row in cur.fetchall()]
