from __future__ import annotations

import structlog
from flask import Flask, jsonify, request

from ..auth.middleware import current_user, make_jwt_required
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)

    @app.route("/api/audit", methods=["GET"], endpoint="audit_get")
    @jwt_required
    def get_audit():
        args = request.args
        try:
            entries = container.audit_service.query(
                current_user(),
                table_name=args.get("tableName"),
                record_id=args.get("recordId"),
                user_id=args.get("userId"),
                limit=args.get("limit"),
                offset=args.get("offset"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("audit_fetch_failed")
            return jsonify({"error": "Failed to fetch audit logs"}), 500
        return jsonify([e.to_dict() for e in entries])
