from __future__ import annotations

from enum import Enum


class EmploymentType(str, Enum):
    """Employment type stored on employees.employment_type."""

    FULL_TIME = "full_time"
    PART_TIME = "part_time"


class AuditAction(str, Enum):
    """Actions recorded in audit_log.action."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    RESTORE = "RESTORE"


class AccrualType(str, Enum):
    """Rule types understood by brand accrual configuration."""

    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    ANNUAL = "annual"
    HOURS_WORKED = "hoursWorked"
    TIERED_SENIORITY = "tieredSeniority"


class BackupType(str, Enum):
    """Backup tiers; each one has its own folder under backups/."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    MANUAL = "manual"
