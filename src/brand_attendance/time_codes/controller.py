from __future__ import annotations

import structlog
from flask import Flask, jsonify

from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-codes", methods=["GET"], endpoint="time_codes_get")
    def get_time_codes():
        try:
            return jsonify(container.time_code_service.list_for_api())
        except Exception:
            logger.exception("time_codes_fetch_failed")
            return jsonify({"error": "Failed to fetch time codes"}), 500
