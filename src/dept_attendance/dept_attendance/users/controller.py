from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, current_app, flash, redirect, render_template, request, session, url_for

from ..common.web import home_endpoint
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    @app.route("/login", methods=["GET", "POST"], endpoint="login_form")
    def login():
        if "user_id" in session:
            return redirect(url_for(home_endpoint(Role(session["role"]))))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")

            try:
                ctx = container.auth_service.authenticate(username, password)

                session.permanent = True
                app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

                session["user_id"] = ctx.user_id
                session["name"] = ctx.name
                session["role"] = ctx.role.value
                return redirect(url_for(home_endpoint(ctx.role)))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed")
                if bool(current_app.config.get("DEBUG", False)):
                    flash(f"System error during login: {e}", "danger")
                else:
                    flash("System error during login", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))
