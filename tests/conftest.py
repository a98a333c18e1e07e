from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from flask import Flask

from brand_attendance.container import build_container
from brand_attendance.database.bootstrap import init_databases, seed_defaults
from brand_attendance.database.connection import DBConfig
from brand_attendance.logging_setup import install_request_id
from brand_attendance.main import register_routes

TODAY = date(2026, 6, 15)
NOW = datetime(2026, 6, 15, 9, 30, tzinfo=timezone.utc)
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def db_config(tmp_path) -> dict:
    return {"data_dir": str(tmp_path / "databases"), "attendance_db": "attendance.db", "auth_db": "auth.db"}


@pytest.fixture
def container(db_config, tmp_path):
    db = DBConfig.from_dict(db_config)
    init_databases(db)
    seed_defaults(db, admin_password=ADMIN_PASSWORD)
    return build_container(
        db_config=db_config,
        jwt_secret="test-secret",
        brand="TRL",
        brand_selection_file=str(tmp_path / "brand-selection.json"),
        today=lambda: TODAY,
        clock=lambda: NOW,
    )


@pytest.fixture
def app(container) -> Flask:
    app = Flask("brand_attendance_tests")
    app.config["TESTING"] = True
    install_request_id(app)
    register_routes(app, container)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Log in and return bearer headers."""

    def _login(username: str = "admin", password: str = ADMIN_PASSWORD) -> dict:
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login


@pytest.fixture
def admin_headers(login) -> dict:
    return login()
