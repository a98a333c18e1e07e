from __future__ import annotations

import structlog
from flask import Flask, jsonify, request

from ..auth.middleware import client_info, current_user, make_jwt_required
from ..common.http import error_response
from ..common.validators import as_flag, require_int
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)
    service = container.permission_service

    @app.route("/api/user-group-permissions", methods=["GET"], endpoint="user_group_permissions_get")
    @jwt_required
    def get_permissions():
        try:
            user_id = request.args.get("userId")
            if not user_id:
                raise ValidationError("userId is required")
            permissions = service.list_user_permissions(current_user(), user_id=require_int(user_id, "userId"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("permissions_fetch_failed")
            return jsonify({"error": "Failed to fetch permissions"}), 500
        return jsonify([p.to_dict() for p in permissions])

    @app.route("/api/user-group-permissions", methods=["POST"], endpoint="user_group_permissions_set")
    @jwt_required
    def set_permission():
        body = request.get_json(silent=True) or {}
        try:
            if not body.get("userId") or not body.get("groupId"):
                raise ValidationError("userId and groupId are required")
            permission = service.set_user_permission(
                current_user(),
                user_id=require_int(body["userId"], "userId"),
                group_id=require_int(body["groupId"], "groupId"),
                can_create=bool(as_flag(body.get("can_create"))),
                can_read=bool(as_flag(body.get("can_read", True))),
                can_update=bool(as_flag(body.get("can_update"))),
                can_delete=bool(as_flag(body.get("can_delete"))),
                client=client_info(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("permission_set_failed")
            return jsonify({"error": "Failed to set permission"}), 500
        return jsonify(permission.to_dict() if permission else {"success": True})

    @app.route("/api/user-group-permissions", methods=["DELETE"], endpoint="user_group_permissions_delete")
    @jwt_required
    def delete_permission():
        try:
            user_id, group_id = request.args.get("userId"), request.args.get("groupId")
            if not user_id or not group_id:
                raise ValidationError("userId and groupId are required")
            service.remove_user_permission(
                current_user(),
                user_id=require_int(user_id, "userId"),
                group_id=require_int(group_id, "groupId"),
                client=client_info(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("permission_delete_failed")
            return jsonify({"error": "Failed to delete permission"}), 500
        return jsonify({"success": True})
