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
    service = container.job_title_service

    @app.route("/api/job-titles", methods=["GET"], endpoint="job_titles_get")
    @jwt_required
    def get_job_titles():
        job_title_id = request.args.get("id")
        try:
            if job_title_id:
                return jsonify(service.get(job_title_id).to_dict())
            return jsonify([t.to_dict() for t in service.list_active()])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("job_titles_fetch_failed")
            return jsonify({"error": "Failed to fetch job titles"}), 500

    @app.route("/api/job-titles", methods=["POST"], endpoint="job_titles_create")
    @jwt_required
    def create_job_title():
        try:
            job_title = service.create(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("job_title_create_failed")
            return jsonify({"error": "Failed to create job title"}), 500
        return jsonify(job_title.to_dict()), 201

    @app.route("/api/job-titles", methods=["PUT"], endpoint="job_titles_update")
    @jwt_required
    def update_job_title():
        try:
            job_title = service.update(current_user(), request.get_json(silent=True) or {}, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("job_title_update_failed")
            return jsonify({"error": "Failed to update job title"}), 500
        return jsonify(job_title.to_dict())

    @app.route("/api/job-titles", methods=["DELETE"], endpoint="job_titles_delete")
    @jwt_required
    def delete_job_title():
        try:
            service.delete(current_user(), request.args.get("id"), client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("job_title_delete_failed")
            return jsonify({"error": "Failed to delete job title"}), 500
        return jsonify({"success": True})
