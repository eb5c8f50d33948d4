from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, session, url_for

from ..common.web import GENERIC_PAGE_ERROR, current_context, home_endpoint, json_error, login_required, role_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

_NO_CACHE = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/teacher/dashboard", endpoint="teacher_dashboard")
    @role_required(Role.TEACHER)
    def teacher_dashboard():
        try:
            data = container.dashboard_service.teacher_dashboard(current_context())
            error = None
        except DomainError as e:
            data, error = None, str(e)
        except Exception:
            logger.exception("Failed to load the teacher dashboard")
            data, error = None, GENERIC_PAGE_ERROR
        html = render_template("teacher/dashboard.html", data=data, error=error, active_page="teacher_dashboard")
        return html, 200, _NO_CACHE

    @app.route("/teacher/dashboard/refresh", endpoint="teacher_dashboard_refresh")
    @role_required(Role.TEACHER, api=True)
    def teacher_dashboard_refresh():
        try:
            data = container.dashboard_service.teacher_summary(current_context())
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True, "data": data})

    @app.route("/student/dashboard", endpoint="student_dashboard")
    @login_required
    def student_dashboard():
        role = Role(session["role"])
        if role is not Role.STUDENT:
            return redirect(url_for(home_endpoint(role)))
        try:
            summary = container.dashboard_service.student_summary(current_context())
        except DomainError as e:
            flash(str(e), "danger")
            summary = None
        except Exception:
            logger.exception("Failed to load the student dashboard")
            flash(GENERIC_PAGE_ERROR, "danger")
            summary = None
        return render_template("student/dashboard.html", summary=summary, active_page="student_dashboard")
