from __future__ import annotations

import logging
from functools import wraps

from flask import flash, jsonify, redirect, render_template, session, url_for

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NoActivePeriodError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..users.model import RequestContext

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    NoActivePeriodError: 409,
    ConflictError: 409,
    StorageError: 503,
}

GENERIC_PAGE_ERROR = "Something went wrong, please try again"


def current_context() -> RequestContext:
    return RequestContext(
        user_id=int(session["user_id"]),
        name=str(session.get("name") or ""),
        role=Role(session["role"]),
    )


def home_endpoint(role: Role) -> str:
    return {
        Role.ADMIN: "admin_dashboard",
        Role.TEACHER: "teacher_dashboard",
        Role.STUDENT: "student_dashboard",
    }[role]


def render_forbidden():
    current_user = {"name": session.get("name"), "role": session.get("role")}
    return render_template("403.html", current_user=current_user), 403


def status_code_for(error: DomainError) -> int:
    for cls, code in _STATUS_CODES.items():
        if isinstance(error, cls):
            return code
    return 400


def json_error(error: Exception):
    """`{"success": false, "error": ...}` with a status matching the error."""

    if isinstance(error, DomainError):
        return jsonify({"success": False, "error": str(error)}), status_code_for(error)
    logger.exception("Unhandled error in API call")
    return jsonify({"success": False, "error": "Internal server error"}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to continue", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role, *, api: bool = False):
    """Restrict a view to one role; pages render 403.html, APIs answer JSON."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                if api:
                    return jsonify({"success": False, "error": "Not logged in"}), 401
                return redirect(url_for("login"))

            if session.get("role") != role.value:
                if api:
                    return jsonify({"success": False, "error": "Access denied"}), 403
                return render_forbidden()

            return view(*args, **kwargs)

        return wrapper

    return decorator


def page_error(error: Exception, *, endpoint: str = "teacher_dashboard"):
    """Flash the error and redirect; anything that is not a DomainError is logged."""

    if isinstance(error, DomainError):
        flash(str(error), "danger")
    else:
        logger.exception("Unhandled error while rendering a page")
        flash(GENERIC_PAGE_ERROR, "danger")
    return redirect(url_for(endpoint))
