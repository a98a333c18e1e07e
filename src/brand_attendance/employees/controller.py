from __future__ import annotations

import structlog
from flask import Flask, jsonify, request

from ..auth.middleware import client_info, current_user, make_jwt_required
from ..common.http import error_response, query_flag
from ..core.exceptions import DomainError
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_get")
    @jwt_required
    def get_employees():
        employee_id = request.args.get("id")
        try:
            if employee_id:
                return jsonify(service.get(current_user(), employee_id).to_dict())
            employees = service.list_visible(
                current_user(), include_inactive=query_flag(request.args.get("includeInactive"))
            )
            return jsonify([e.to_dict() for e in employees])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("employees_fetch_failed")
            return jsonify({"error": "Failed to fetch employees"}), 500

    @app.route("/api/employees/seniority", methods=["GET"], endpoint="employees_seniority")
    @jwt_required
    def get_seniority():
        try:
            return jsonify(service.seniority_list(current_user()))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("employees_seniority_failed")
            return jsonify({"error": "Failed to fetch seniority list"}), 500

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @jwt_required
    def create_employee():
        body = request.get_json(silent=True) or {}
        try:
            employee = service.create(current_user(), body, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("employee_create_failed")
            return jsonify({"error": "Failed to create employee"}), 500
        logger.info("employee_created", employee_id=employee.id, user_id=current_user().id)
        return jsonify(employee.to_dict()), 201

    @app.route("/api/employees", methods=["PUT"], endpoint="employees_update")
    @jwt_required
    def update_employee():
        body = request.get_json(silent=True) or {}
        try:
            employee = service.update(current_user(), body, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("employee_update_failed")
            return jsonify({"error": "Failed to update employee"}), 500
        return jsonify(employee.to_dict())

    @app.route("/api/employees", methods=["DELETE"], endpoint="employees_delete")
    @jwt_required
    def delete_employee():
        try:
            service.delete(current_user(), request.args.get("id"), client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("employee_delete_failed")
            return jsonify({"error": "Failed to delete employee"}), 500
        return jsonify({"success": True})
