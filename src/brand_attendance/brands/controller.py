from __future__ import annotations

import structlog
from flask import Flask, jsonify

from ..auth.middleware import make_jwt_required
from ..container import Container

logger = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    jwt_required = make_jwt_required(container.auth_service)
    brands = container.brands

    @app.route("/api/brand-selection", methods=["GET"], endpoint="brand_selection")
    def brand_selection():
        return jsonify(brands.selection())

    @app.route("/api/brand-config", methods=["GET"], endpoint="brand_config")
    def brand_config():
        try:
            return jsonify(brands.brand_config().to_dict())
        except Exception:
            logger.exception("brand_config_failed")
            return jsonify({"error": "Failed to load brand config"}), 500

    @app.route("/api/brand-features", methods=["GET"], endpoint="brand_features")
    @jwt_required
    def brand_features():
        try:
            return jsonify(brands.features())
        except Exception:
            logger.exception("brand_features_failed")
            return jsonify({"error": "Failed to load brand features"}), 500
