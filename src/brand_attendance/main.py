from __future__ import annotations

import importlib

import structlog
from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .logging_setup import install_request_id, setup_logging

from .database.bootstrap import init_databases, seed_defaults, seed_demo_data
from .database.connection import DBConfig

from .container import Container, build_container
from .allocations.controller import register as register_allocations
from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .auth.controller import register as register_auth
from .backup.controller import register as register_backup
from .brands.controller import register as register_brands
from .employees.controller import register as register_employees
from .job_titles.controller import register as register_job_titles
from .permissions.controller import register as register_permissions
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .time_codes.controller import register as register_time_codes
from .users.controller import register as register_users

logger = structlog.get_logger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    setup_logging()
    app = Flask(__name__)
    install_request_id(app)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = dict(getattr(settings, "DB_CONFIG"))
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    db = DBConfig.from_dict(db_config)
    logger.info("app_starting", settings=settings_module, data_dir=db.data_dir)

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        applied = init_databases(db)
        logger.info("databases_ready", migrations=applied)
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        seed_defaults(db)
    if bool(getattr(settings, "DEMO_MODE", False)):
        seed_demo_data(db)

    container = build_container(
        db_config=db_config,
        jwt_secret=getattr(settings, "JWT_SECRET", app.secret_key),
        jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 24)),
        brands_dir=getattr(settings, "BRANDS_DIR", None),
        brand=getattr(settings, "BRAND", None),
        brand_selection_file=getattr(settings, "BRAND_SELECTION_FILE", None),
        backup_retention=getattr(settings, "BACKUP_RETENTION", None),
    )
    app.extensions["brand_attendance"] = container
    register_routes(app, container)
    return app


def register_routes(app: Flask, container: Container) -> None:
    register_auth(app, container)
    register_brands(app, container)
    register_time_codes(app, container)
    register_employees(app, container)
    register_users(app, container)
    register_permissions(app, container)
    register_job_titles(app, container)
    register_attendance(app, container)
    register_allocations(app, container)
    register_reports(app, container)
    register_audit(app, container)
    register_settings(app, container)
    register_backup(app, container)
