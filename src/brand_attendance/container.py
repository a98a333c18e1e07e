from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .allocations.service import AllocationService
from .allocations.sqlite_allocation_repository import SQLiteAllocationRepository
from .attendance.service import AttendanceService
from .attendance.sqlite_attendance_repository import SQLiteAttendanceRepository
from .audit.service import AuditService
from .audit.sqlite_audit_repository import SQLiteAuditRepository
from .auth.service import AuthService
from .backup.manager import BackupManager
from .backup.service import BackupService
from .brands.loader import BrandCatalog
from .common.datetime_utils import now_utc, today_local
from .core.constants import DEFAULT_TOKEN_HOURS, RETENTION_DAILY, RETENTION_MONTHLY, RETENTION_WEEKLY
from .database.connection import DatabaseConnection, DBConfig
from .employees.service import EmployeeService
from .employees.sqlite_employee_repository import SQLiteEmployeeRepository
from .job_titles.service import JobTitleService
from .job_titles.sqlite_job_title_repository import SQLiteJobTitleRepository
from .permissions.service import PermissionService
from .permissions.sqlite_permission_repository import SQLitePermissionRepository
from .reports.service import AttendanceReportService, LeaveBalanceReportService, ReportDefinitionService
from .settings.service import AppSettingsService
from .settings.sqlite_app_settings_repository import SQLiteAppSettingsRepository
from .time_codes.service import TimeCodeService
from .time_codes.sqlite_time_code_repository import SQLiteTimeCodeRepository
from .users.service import EmployeeLinkService, GroupService, RoleService, UserService
from .users.sqlite_group_repository import SQLiteGroupRepository, SQLiteRoleRepository
from .users.sqlite_user_repository import SQLiteUserRepository


@dataclass(frozen=True)
class Container:
    db_config: DBConfig
    attendance_conn: DatabaseConnection
    auth_conn: DatabaseConnection
    brands: BrandCatalog

    users_repo: SQLiteUserRepository
    groups_repo: SQLiteGroupRepository
    roles_repo: SQLiteRoleRepository
    permissions_repo: SQLitePermissionRepository
    audit_repo: SQLiteAuditRepository
    job_titles_repo: SQLiteJobTitleRepository
    settings_repo: SQLiteAppSettingsRepository
    employees_repo: SQLiteEmployeeRepository
    time_codes_repo: SQLiteTimeCodeRepository
    entries_repo: SQLiteAttendanceRepository
    allocations_repo: SQLiteAllocationRepository

    audit_service: AuditService
    auth_service: AuthService
    permission_service: PermissionService
    user_service: UserService
    group_service: GroupService
    role_service: RoleService
    employee_link_service: EmployeeLinkService
    job_title_service: JobTitleService
    settings_service: AppSettingsService
    employee_service: EmployeeService
    time_code_service: TimeCodeService
    attendance_service: AttendanceService
    allocation_service: AllocationService
    report_service: LeaveBalanceReportService
    attendance_report_service: AttendanceReportService
    report_definition_service: ReportDefinitionService
    backup_manager: BackupManager
    backup_service: BackupService


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_expires_hours: int = DEFAULT_TOKEN_HOURS,
    brands_dir: Optional[str] = None,
    brand: Optional[str] = None,
    brand_selection_file: Optional[str] = None,
    backup_retention: Optional[dict] = None,
    today: Callable[[], date] = today_local,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    config = DBConfig.from_dict(db_config)
    attendance_conn = DatabaseConnection.get_instance(config.attendance_path)
    auth_conn = DatabaseConnection.get_instance(config.auth_path)
    brands = BrandCatalog(brands_dir, brand=brand, selection_file=brand_selection_file)

    users_repo = SQLiteUserRepository(auth_conn)
    groups_repo = SQLiteGroupRepository(auth_conn)
    roles_repo = SQLiteRoleRepository(auth_conn)
    permissions_repo = SQLitePermissionRepository(auth_conn)
    audit_repo = SQLiteAuditRepository(auth_conn)
    job_titles_repo = SQLiteJobTitleRepository(auth_conn)
    settings_repo = SQLiteAppSettingsRepository(auth_conn)
    employees_repo = SQLiteEmployeeRepository(attendance_conn)
    time_codes_repo = SQLiteTimeCodeRepository(attendance_conn)
    entries_repo = SQLiteAttendanceRepository(attendance_conn)
    allocations_repo = SQLiteAllocationRepository(attendance_conn)

    audit_service = AuditService(audit_repo)
    auth_service = AuthService(
        users_repo,
        groups_repo,
        roles_repo,
        audit_service,
        jwt_secret=jwt_secret,
        expires_hours=jwt_expires_hours,
    )
    permission_service = PermissionService(users_repo, groups_repo, permissions_repo, audit_service)
    time_code_service = TimeCodeService(time_codes_repo, brands)

    retention = backup_retention or {}
    backup_manager = BackupManager(
        config,
        retention_daily=int(retention.get("daily", RETENTION_DAILY)),
        retention_weekly=int(retention.get("weekly", RETENTION_WEEKLY)),
        retention_monthly=int(retention.get("monthly", RETENTION_MONTHLY)),
        clock=clock,
    )

    return Container(
        db_config=config,
        attendance_conn=attendance_conn,
        auth_conn=auth_conn,
        brands=brands,
        users_repo=users_repo,
        groups_repo=groups_repo,
        roles_repo=roles_repo,
        permissions_repo=permissions_repo,
        audit_repo=audit_repo,
        job_titles_repo=job_titles_repo,
        settings_repo=settings_repo,
        employees_repo=employees_repo,
        time_codes_repo=time_codes_repo,
        entries_repo=entries_repo,
        allocations_repo=allocations_repo,
        audit_service=audit_service,
        auth_service=auth_service,
        permission_service=permission_service,
        user_service=UserService(users_repo, audit_service),
        group_service=GroupService(groups_repo, audit_service),
        role_service=RoleService(roles_repo),
        employee_link_service=EmployeeLinkService(users_repo, employees_repo, audit_service),
        job_title_service=JobTitleService(job_titles_repo, audit_service),
        settings_service=AppSettingsService(settings_repo, audit_service),
        employee_service=EmployeeService(employees_repo, permission_service, audit_service),
        time_code_service=time_code_service,
        attendance_service=AttendanceService(
            entries_repo,
            employees_repo,
            permission_service,
            time_code_service,
            audit_service,
            today=today,
        ),
        allocation_service=AllocationService(
            allocations_repo,
            employees_repo,
            entries_repo,
            time_code_service,
            brands,
            audit_service,
            today=today,
        ),
        report_service=LeaveBalanceReportService(
            employees_repo,
            allocations_repo,
            entries_repo,
            permission_service,
            brands,
            today=today,
        ),
        attendance_report_service=AttendanceReportService(entries_repo, permission_service, brands),
        report_definition_service=ReportDefinitionService(brands),
        backup_manager=backup_manager,
        backup_service=BackupService(backup_manager, audit_service),
    )
