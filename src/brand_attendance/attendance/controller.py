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
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_get")
    @jwt_required
    def get_attendance():
        employee_id = request.args.get("employeeId")
        try:
            if not employee_id:
                entries = service.list_all(current_user())
            else:
                entries = service.entries_for_employee(
                    current_user(),
                    employee_id,
                    start_date=request.args.get("startDate"),
                    end_date=request.args.get("endDate"),
                    year=request.args.get("year"),
                )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("attendance_fetch_failed")
            return jsonify({"error": "Failed to fetch attendance entries"}), 500
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_save")
    @jwt_required
    def save_attendance():
        try:
            service.record(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("attendance_save_failed")
            return jsonify({"error": "Failed to save attendance entry"}), 500
        return jsonify({"success": True})
