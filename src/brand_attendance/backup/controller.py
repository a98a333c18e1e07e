from __future__ import annotations

import structlog
from flask import Flask, jsonify, request, send_file

from ..auth.middleware import client_info, current_user, make_jwt_required
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)
    service = container.backup_service

    @app.route("/api/backup", methods=["GET"], endpoint="backup_list")
    @jwt_required
    def list_backups():
        try:
            if request.args.get("action") == "status":
                return jsonify(service.status(current_user()))
            return jsonify({"backups": service.list_backups(current_user())})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_list_failed")
            return jsonify({"error": "Failed to list backups"}), 500

    @app.route("/api/backup", methods=["POST"], endpoint="backup_create")
    @jwt_required
    def create_backup():
        try:
            backup = service.create_manual(current_user(), client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_create_failed")
            return jsonify({"error": "Failed to create backup"}), 500
        return jsonify({"success": True, "backup": backup.to_dict()})

    @app.route("/api/backup/<backup_id>", methods=["GET"], endpoint="backup_get")
    @jwt_required
    def get_backup(backup_id: str):
        try:
            if request.args.get("action") == "verify":
                return jsonify(service.verify(current_user(), backup_id))
            return jsonify(service.get(current_user(), backup_id).to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_get_failed", backup_id=backup_id)
            return jsonify({"error": "Failed to get backup"}), 500

    @app.route("/api/backup/<backup_id>", methods=["POST"], endpoint="backup_restore")
    @jwt_required
    def restore_backup(backup_id: str):
        try:
            result = service.restore(current_user(), backup_id, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_restore_failed", backup_id=backup_id)
            return jsonify({"error": "Failed to restore backup"}), 500
        return jsonify(result)

    @app.route("/api/backup/<backup_id>", methods=["DELETE"], endpoint="backup_delete")
    @jwt_required
    def delete_backup(backup_id: str):
        try:
            service.delete(current_user(), backup_id, client=client_info())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_delete_failed", backup_id=backup_id)
            return jsonify({"error": "Failed to delete backup"}), 500
        return jsonify({"success": True})

    @app.route("/api/backup/<backup_id>/download", methods=["GET"], endpoint="backup_download")
    @jwt_required
    def download_backup(backup_id: str):
        try:
            path = service.download_path(current_user(), backup_id, request.args.get("db"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("backup_download_failed", backup_id=backup_id)
            return jsonify({"error": "Failed to download backup"}), 500
        return send_file(path, as_attachment=True, download_name=path.name, mimetype="application/octet-stream")
