from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, render_template, request

from ..common.datetime_utils import format_hhmm
from ..common.web import GENERIC_PAGE_ERROR, current_context, json_error, page_error, role_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .model import TimetablePeriod

logger = logging.getLogger(__name__)


def period_to_dict(p: TimetablePeriod) -> dict:
    return {
        "id": p.period_id,
        "class_id": p.class_id,
        "day_of_week": p.day_of_week,
        "period_number": p.period_number,
        "start_time": format_hhmm(p.start_time),
        "end_time": format_hhmm(p.end_time),
        "subject_id": p.subject_id,
        "teacher_id": p.teacher_id,
        "is_break": p.is_break,
        "break_name": p.break_name,
        "subject_name": p.subject_name,
        "subject_code": p.subject_code,
        "teacher_name": p.teacher_name,
    }


def register(app: Flask, container: Container) -> None:
    # -------- Teacher --------
    @app.route("/teacher/timetable", endpoint="teacher_timetable")
    @role_required(Role.TEACHER)
    def teacher_timetable():
        try:
            data = container.timetable_service.weekly_for_teacher(current_context())
        except Exception as e:
            return page_error(e)
        return render_template("teacher/timetable.html", data=data, active_page="teacher_timetable")

    # -------- Admin --------
    @app.route("/admin/dashboard", endpoint="admin_dashboard")
    @role_required(Role.ADMIN)
    def admin_dashboard():
        ctx = current_context()
        try:
            stats = container.dashboard_service.admin_stats(ctx)
            classes = container.classes_repo.list_all()
        except DomainError as e:
            flash(str(e), "danger")
            stats, classes = None, []
        except Exception:
            logger.exception("Failed to load the admin dashboard")
            flash(GENERIC_PAGE_ERROR, "danger")
            stats, classes = None, []
        return render_template("admin/dashboard.html", stats=stats, classes=classes, active_page="admin_dashboard")

    @app.route("/api/timetable/<int:class_id>", methods=["GET"], endpoint="api_class_timetable")
    @role_required(Role.ADMIN, api=True)
    def api_class_timetable(class_id: int):
        try:
            days = container.timetable_service.class_timetable(current_context(), class_id=class_id)
        except Exception as e:
            return json_error(e)
        return jsonify(
            {
                "success": True,
                "timetable": [
                    {
                        "day_of_week": d.day_of_week,
                        "day": d.day,
                        "periods": [period_to_dict(p) for p in d.periods],
                    }
                    for d in days
                ],
            }
        )

    @app.route("/api/timetable/period", methods=["POST"], endpoint="api_save_period")
    @role_required(Role.ADMIN, api=True)
    def api_save_period():
        try:
            period = container.timetable_service.save_period(current_context(), request.get_json(silent=True) or {})
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True, "period": period_to_dict(period)})

    @app.route("/api/timetable/period/<int:period_id>", methods=["DELETE"], endpoint="api_delete_period")
    @role_required(Role.ADMIN, api=True)
    def api_delete_period(period_id: int):
        try:
            removed = container.timetable_service.delete_period(current_context(), period_id=period_id)
        except Exception as e:
            return json_error(e)
        return jsonify(
            {
                "success": True,
                "deletedAttendanceRecords": removed,
                "message": f"Period deleted along with {removed} attendance records",
            }
        )

    @app.route("/api/admin/class/<int:class_id>/periods", methods=["DELETE"], endpoint="api_clear_class_periods")
    @role_required(Role.ADMIN, api=True)
    def api_clear_class_periods(class_id: int):
        try:
            periods, attendance = container.timetable_service.clear_class(current_context(), class_id=class_id)
        except Exception as e:
            return json_error(e)
        return jsonify(
            {
                "success": True,
                "deletedPeriods": periods,
                "deletedAttendanceRecords": attendance,
                "message": f"Deleted {periods} periods and {attendance} attendance records",
            }
        )
