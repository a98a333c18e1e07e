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
    service = container.report_service
    attendance_reports = container.attendance_report_service
    definitions = container.report_definition_service

    @app.route("/api/reports", methods=["GET"], endpoint="attendance_report")
    @jwt_required
    def attendance_report():
        try:
            rows = attendance_reports.entries(
                current_user(),
                start_date=request.args.get("startDate"),
                end_date=request.args.get("endDate"),
                employee_id=request.args.get("employeeId"),
                time_code=request.args.get("timeCode"),
            )
            return jsonify(rows)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("attendance_report_failed")
            return jsonify({"error": "Failed to fetch report data"}), 500

    @app.route("/api/report-definitions", methods=["GET"], endpoint="report_definitions")
    def report_definitions():
        try:
            report_id = request.args.get("id")
            if report_id:
                return jsonify(definitions.get(report_id))
            return jsonify(definitions.available())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("report_definitions_failed")
            return jsonify({"error": "Failed to fetch report definitions"}), 500

    @app.route("/api/reports/leave-balance-summary", methods=["GET"], endpoint="leave_balance_summary")
    @jwt_required
    def leave_balance_summary():
        try:
            summary = service.summary(current_user(), request.args.get("year"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("leave_balance_summary_failed")
            return jsonify({"error": "Failed to generate leave balance summary"}), 500

        if request.args.get("format") == "csv":
            filename = f"leave-balance-summary-{summary['year']}.csv"
            return app.response_class(
                service.to_csv(summary).encode("utf-8-sig"),
                mimetype="text/csv",
                headers={"Content-Disposition": f"attachment; filename={filename}"},
            )
        return jsonify(summary)
