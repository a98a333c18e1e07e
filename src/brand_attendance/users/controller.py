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
    users = container.user_service
    groups = container.group_service

    @app.route("/api/users", methods=["GET"], endpoint="users_get")
    @jwt_required
    def get_users():
        user_id = request.args.get("id")
        try:
            if user_id:
                return jsonify(users.get(current_user(), user_id).to_public_dict())
            return jsonify(list(users.list_users(current_user())))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("users_fetch_failed")
            return jsonify({"error": "Failed to fetch users"}), 500

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @jwt_required
    def create_user():
        try:
            user = users.create(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("user_create_failed")
            return jsonify({"error": "Failed to create user"}), 500
        return jsonify(user.to_public_dict()), 201

    @app.route("/api/users", methods=["PUT"], endpoint="users_update")
    @jwt_required
    def update_user():
        try:
            user = users.update(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("user_update_failed")
            return jsonify({"error": "Failed to update user"}), 500
        return jsonify(user.to_public_dict())

    @app.route("/api/users", methods=["DELETE"], endpoint="users_delete")
    @jwt_required
    def delete_user():
        try:
            users.delete(current_user(), request.args.get("id"), client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("user_delete_failed")
            return jsonify({"error": "Failed to delete user"}), 500
        return jsonify({"success": True})

    @app.route("/api/groups", methods=["GET"], endpoint="groups_get")
    @jwt_required
    def get_groups():
        try:
            return jsonify([g.to_dict() for g in groups.list_groups()])
        except Exception:
            logger.exception("groups_fetch_failed")
            return jsonify({"error": "Failed to fetch groups"}), 500

    @app.route("/api/groups", methods=["POST"], endpoint="groups_create")
    @jwt_required
    def create_group():
        try:
            group = groups.create(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("group_create_failed")
            return jsonify({"error": "Failed to create group"}), 500
        return jsonify(group.to_dict()), 201

    @app.route("/api/groups", methods=["PUT"], endpoint="groups_update")
    @jwt_required
    def update_group():
        try:
            group = groups.update(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("group_update_failed")
            return jsonify({"error": "Failed to update group"}), 500
        return jsonify(group.to_dict())

    @app.route("/api/roles", methods=["GET"], endpoint="roles_get")
    @jwt_required
    def get_roles():
        try:
            return jsonify([r.to_dict() for r in container.role_service.list_roles(current_user())])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("roles_fetch_failed")
            return jsonify({"error": "Failed to fetch roles"}), 500

    @app.route("/api/user-employee-link", methods=["GET"], endpoint="user_employee_link_get")
    @jwt_required
    def get_linkable_employees():
        actor = current_user()
        try:
            employees = container.employee_link_service.linkable_employees(actor)
        except Exception:
            logger.exception("linkable_employees_failed")
            return jsonify({"error": "Failed to fetch employees"}), 500
        return jsonify(
            {
                "employees": [e.to_dict() for e in employees],
                "user": {
                    "id": actor.id,
                    "full_name": actor.full_name,
                    "email": actor.email,
                    "group_id": actor.group_id,
                },
            }
        )

    @app.route("/api/user-employee-link", methods=["POST"], endpoint="user_employee_link_post")
    @jwt_required
    def link_employee():
        actor = current_user()
        try:
            employee_id = container.employee_link_service.link(
                actor, request.get_json(silent=True) or {}, client=client_info()
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("link_employee_failed")
            return jsonify({"error": "Failed to link employee"}), 500
        user = actor.to_dict()
        user["employee_id"] = employee_id
        return jsonify({"success": True, "employee_id": employee_id, "user": user})
