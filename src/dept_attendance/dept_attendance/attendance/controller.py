from __future__ import annotations

import logging

from flask import Flask, jsonify, render_template, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_context, json_error, page_error, render_forbidden, role_required
from ..container import Container
from ..core.enums import ReportWindow, Role
from ..core.exceptions import AuthorizationError
from .service import parse_bulk_changes

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/teacher/class/<int:class_id>/attendance", endpoint="class_attendance")
    @role_required(Role.TEACHER)
    def class_attendance(class_id: int):
        try:
            page = container.attendance_service.roster_for_today(current_context(), class_id=class_id)
        except AuthorizationError:
            return render_forbidden()
        except Exception as e:
            return page_error(e)
        return render_template("teacher/attendance.html", page=page, active_page="teacher_dashboard")

    @app.route("/teacher/mark-attendance", methods=["POST"], endpoint="mark_attendance")
    @role_required(Role.TEACHER, api=True)
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        ctx = current_context()
        try:
            on_date = (
                parse_iso_date(str(data["date"]))
                if data.get("date")
                else container.clock.today()
            )
            period = container.attendance_service.mark_attendance(
                ctx,
                student_id=data.get("studentId"),
                class_id=data.get("classId"),
                status=data.get("status"),
                on_date=on_date,
            )
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True, "periodId": period.period_id})

    @app.route("/teacher/attendance/<int:class_id>/history", endpoint="attendance_history")
    @role_required(Role.TEACHER)
    def attendance_history(class_id: int):
        ctx = current_context()
        try:
            date_s = request.args.get("date")
            reference = parse_iso_date(date_s) if date_s else container.clock.today()
            grid = container.history_builder.build(
                ctx,
                class_id=class_id,
                view=request.args.get("view", "week"),
                reference_date=reference,
            )
        except AuthorizationError:
            return render_forbidden()
        except Exception as e:
            return page_error(e)
        return render_template("teacher/history.html", grid=grid, active_page="teacher_dashboard")

    @app.route("/teacher/reports/<int:class_id>", endpoint="class_report")
    @role_required(Role.TEACHER)
    def class_report(class_id: int):
        try:
            report = container.report_aggregator.build(
                current_context(),
                class_id=class_id,
                window=request.args.get("period", ReportWindow.WEEK.value),
            )
        except AuthorizationError:
            return render_forbidden()
        except Exception as e:
            return page_error(e)
        return render_template("teacher/reports.html", report=report, active_page="teacher_dashboard")

    @app.route("/api/attendance/bulk-update", methods=["POST"], endpoint="api_bulk_update")
    @role_required(Role.TEACHER, api=True)
    def api_bulk_update():
        data = request.get_json(silent=True) or {}
        try:
            changes = parse_bulk_changes(data.get("changes") or [])
            updated = container.attendance_service.bulk_update(
                current_context(),
                class_id=data.get("classId"),
                changes=changes,
            )
        except Exception as e:
            return json_error(e)
        return jsonify(
            {
                "success": True,
                "updatedCount": updated,
                "message": f"Successfully updated {updated} attendance records",
            }
        )
