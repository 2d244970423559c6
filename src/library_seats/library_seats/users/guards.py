"""Session-based access checks shared by the controllers."""
from __future__ import annotations

from functools import wraps

from flask import flash, jsonify, redirect, render_template, session, url_for

from ..core.enums import Role


def _current_role():
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def api_roles_required(*roles: Role):
    """JSON endpoints: 401 without a session, 403 for a role outside ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"message": "Authentication required"}), 401
            if _current_role() not in roles:
                return jsonify({"message": "Access denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def page_roles_required(*roles: Role):
    """HTML pages: redirect to the login page, render 403.html for a wrong role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                flash("Please log in to continue.", "warning")
                return redirect(url_for("login"))
            if _current_role() not in roles:
                current_user = {"full_name": session.get("name"), "role": session.get("role")}
                return render_template("403.html", current_user=current_user), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


staff_or_admin_api = api_roles_required(Role.ADMIN, Role.STAFF)
admin_api = api_roles_required(Role.ADMIN)
staff_or_admin_page = page_roles_required(Role.ADMIN, Role.STAFF)
admin_page = page_roles_required(Role.ADMIN)
