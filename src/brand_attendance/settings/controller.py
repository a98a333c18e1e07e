from __future__ import annotations

import structlog
from flask import Flask, jsonify, request

from ..auth.middleware import client_info, current_user, make_jwt_required
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)
    service = container.settings_service

    @app.route("/api/app-settings", methods=["GET"], endpoint="app_settings_get")
    @jwt_required
    def get_settings():
        try:
            return jsonify(service.all_for(current_user()))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("app_settings_fetch_failed")
            return jsonify({"error": "Failed to fetch settings"}), 500

    @app.route("/api/app-settings", methods=["PUT"], endpoint="app_settings_update")
    @jwt_required
    def update_setting():
        try:
            service.update(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("app_setting_update_failed")
            return jsonify({"error": "Failed to update setting"}), 500
        return jsonify({"success": True})
