from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import error_response, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards
from .service import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    reports = container.report_service

    @app.route("/api/reports/system-stats", methods=["GET"], endpoint="reports_system_stats")
    @guards.admin_required
    def reports_system_stats():
        try:
            return jsonify(to_json(reports.system_stats()))
        except Exception:
            return server_error("Get system stats")

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="reports_attendance")
    @guards.admin_required
    def reports_attendance():
        try:
            return jsonify({"report": to_json(reports.attendance())})
        except Exception:
            return server_error("Get attendance report")

    @app.route("/api/reports/attendance/export", methods=["GET"], endpoint="reports_attendance_export")
    @guards.admin_required
    def reports_attendance_export():
        try:
            data = reports.attendance_xlsx()
        except Exception:
            return server_error("Export attendance report")
        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="seminar_attendance.xlsx",
        )

    @app.route("/api/reports/feedback", methods=["GET"], endpoint="reports_feedback")
    @guards.admin_required
    def reports_feedback():
        try:
            return jsonify({"stats": to_json(list(reports.feedback_stats()))})
        except Exception:
            return server_error("Get feedback stats")

    @app.route("/api/reports/trends", methods=["GET"], endpoint="reports_trends")
    @guards.admin_required
    def reports_trends():
        try:
            return jsonify({"trends": reports.trends(months=request.args.get("months"))})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get registration trends")
