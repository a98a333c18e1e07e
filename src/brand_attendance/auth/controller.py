from __future__ import annotations

import structlog
from flask import Flask, jsonify, make_response, request

from ..core.constants import AUTH_COOKIE_NAME
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container
from .middleware import client_info, current_user, make_jwt_required
from .tokens import token_from_request

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = request.get_json(silent=True) or {}
        try:
            auth_user, token = container.auth_service.login(
                str(body.get("username") or ""),
                str(body.get("password") or ""),
                client=client_info(),
            )
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except AuthenticationError as e:
            return jsonify({"error": str(e)}), 401
        except Exception:
            logger.exception("login_error")
            return jsonify({"error": "Failed to login"}), 500

        response = make_response(jsonify({"user": auth_user.to_dict(), "token": token}))
        response.set_cookie(
            AUTH_COOKIE_NAME,
            token,
            httponly=True,
            samesite="Lax",
            max_age=container.auth_service.expires_hours * 3600,
        )
        return response

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        try:
            container.auth_service.logout(token_from_request(request), client=client_info())
        except Exception:
            logger.exception("logout_audit_failed")

        response = make_response(jsonify({"success": True}))
        response.delete_cookie(AUTH_COOKIE_NAME)
        return response

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @jwt_required
    def me():
        return jsonify({"user": current_user().to_dict()})
