from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError
from .guards import staff_or_admin_api
from .service import SessionUser

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    def _start_session(s_user: SessionUser, *, remember: bool) -> None:
        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

    @app.route("/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        body = request.get_json(silent=True) or {}
        try:
            s_user = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))
        except AuthenticationError as e:
            return jsonify({"message": str(e)}), 401

        _start_session(s_user, remember=bool(body.get("remember_me")))
        return jsonify({"user": {"id": s_user.user_id, "full_name": s_user.full_name, "role": s_user.role.value}})

    @app.route("/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/auth/me", methods=["GET"], endpoint="api_me")
    @staff_or_admin_api
    def api_me():
        return jsonify({"user": {"id": session["user_id"], "full_name": session.get("name"), "role": session.get("role")}})

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("expired_memberships"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(username, password)
                _start_session(s_user, remember=bool(remember))
                flash("Logged in.", "success")
                return redirect(url_for("expired_memberships"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error during login: {e}", "danger")
                else:
                    flash("System error during login", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Logged out.", "info")
        return redirect(url_for("login"))
