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
    service = container.allocation_service

    @app.route("/api/employee-allocations", methods=["GET"], endpoint="allocations_get")
    @jwt_required
    def get_allocations():
        try:
            data = service.allocations_for(request.args.get("employeeId"), request.args.get("year"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("allocations_fetch_failed")
            return jsonify({"error": "Failed to fetch employee allocations"}), 500
        return jsonify(data)

    @app.route("/api/employee-allocations", methods=["POST"], endpoint="allocations_set")
    @jwt_required
    def set_allocation():
        try:
            service.set_allocation(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("allocation_update_failed")
            return jsonify({"error": "Failed to update allocation"}), 500
        return jsonify({"success": True, "message": "Allocation updated successfully"})

    @app.route("/api/employee-allocations", methods=["DELETE"], endpoint="allocations_delete")
    @jwt_required
    def delete_allocation():
        try:
            service.revert_to_default(
                current_user(),
                employee_id=request.args.get("employeeId"),
                time_code=request.args.get("timeCode"),
                year=request.args.get("year"),
                client=client_info(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("allocation_delete_failed")
            return jsonify({"error": "Failed to delete allocation"}), 500
        return jsonify({"success": True, "message": "Allocation reverted to default"})
