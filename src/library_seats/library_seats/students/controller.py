from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.guards import admin_api, staff_or_admin_api
from .serializers import (
    shift_member_to_dict,
    snapshot_to_dict,
    student_summary_to_dict,
    student_to_dict,
)

logger = logging.getLogger(__name__)

_CREATE_FIELDS = (
    "name", "email", "phone", "address", "branch_id", "membership_start", "membership_end",
    "total_fee", "amount_paid", "shift_ids", "seat_id", "cash", "online", "security_money",
    "remark", "profile_image_url",
)
_UPDATE_FIELDS = tuple(f for f in _CREATE_FIELDS if f != "profile_image_url")
_RENEW_FIELDS = (
    "membership_start", "membership_end", "email", "phone", "branch_id", "seat_id", "shift_ids",
    "total_fee", "cash", "online", "security_money", "remark",
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (ConflictError, 400),
    (NotFoundError, 404),
    (AuthenticationError, 401),
)


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        """Map domain errors to status codes; anything else is a 500."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                for error_type, status in _STATUS_BY_ERROR:
                    if isinstance(e, error_type):
                        logger.warning("%s %s rejected: %s", request.method, request.path, e)
                        return jsonify({"message": str(e)}), status
                raise
            except Exception as e:
                logger.exception("%s %s failed", request.method, request.path)
                return jsonify({"message": "Server error", "error": str(e)}), 500

        return wrapper

    def _branch_arg() -> Optional[int]:
        value = request.args.get("branchId") or request.args.get("branch_id") or ""
        return int(value) if value.strip().isdecimal() and int(value) > 0 else None

    def _body(names: tuple[str, ...]) -> dict:
        body = request.get_json(silent=True)
        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return {name: body.get(name) for name in names}

    # -------- reads --------
    @app.route("/students", methods=["GET"], endpoint="students_list")
    @staff_or_admin_api
    @json_errors
    def students_list():
        rows = container.membership_service.list_students(branch_id=_branch_arg())
        return jsonify({"students": [student_summary_to_dict(r) for r in rows]})

    @app.route("/students/active", methods=["GET"], endpoint="students_active")
    @staff_or_admin_api
    @json_errors
    def students_active():
        rows = container.membership_service.list_active(branch_id=_branch_arg())
        return jsonify({"students": [student_to_dict(r) for r in rows]})

    @app.route("/students/expired", methods=["GET"], endpoint="students_expired")
    @staff_or_admin_api
    @json_errors
    def students_expired():
        rows = container.membership_service.list_expired(branch_id=_branch_arg())
        return jsonify({"students": [student_to_dict(r) for r in rows]})

    @app.route("/students/expiring-soon", methods=["GET"], endpoint="students_expiring_soon")
    @staff_or_admin_api
    @json_errors
    def students_expiring_soon():
        rows = container.membership_service.list_expiring_soon(branch_id=_branch_arg())
        return jsonify({"students": [student_to_dict(r) for r in rows]})

    @app.route("/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @staff_or_admin_api
    @json_errors
    def students_get(student_id: int):
        result = container.membership_service.get_student(student_id)
        return jsonify(student_to_dict(result, include_assignments=True))

    @app.route("/students/<int:student_id>/history", methods=["GET"], endpoint="students_history")
    @staff_or_admin_api
    @json_errors
    def students_history(student_id: int):
        rows = container.membership_service.membership_history(student_id)
        return jsonify({"history": [snapshot_to_dict(h) for h in rows]})

    @app.route("/students/shift/<shift_id>", methods=["GET"], endpoint="students_by_shift")
    @staff_or_admin_api
    @json_errors
    def students_by_shift(shift_id: str):
        rows = container.membership_service.list_for_shift(
            shift_id,
            search=request.args.get("search"),
            status=request.args.get("status"),
        )
        return jsonify({"students": [shift_member_to_dict(r) for r in rows]})

    @app.route("/students/stats/dashboard", methods=["GET"], endpoint="students_dashboard_stats")
    @admin_api
    @json_errors
    def students_dashboard_stats():
        stats = container.stats_service.dashboard(branch_id=_branch_arg())
        return jsonify(
            {
                "totalCollection": float(stats.total_collection),
                "totalDue": float(stats.total_due),
                "totalExpense": float(stats.total_expense),
                "profitLoss": float(stats.profit_loss),
            }
        )

    # -------- writes --------
    @app.route("/students", methods=["POST"], endpoint="students_create")
    @staff_or_admin_api
    @json_errors
    def students_create():
        result = container.membership_service.create_student(**_body(_CREATE_FIELDS))
        return jsonify({"student": student_to_dict(result)}), 201

    @app.route("/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @staff_or_admin_api
    @json_errors
    def students_update(student_id: int):
        result = container.membership_service.update_student(student_id, **_body(_UPDATE_FIELDS))
        return jsonify({"student": student_to_dict(result)})

    @app.route("/students/<int:student_id>/renew", methods=["POST"], endpoint="students_renew")
    @admin_api
    @json_errors
    def students_renew(student_id: int):
        result = container.membership_service.renew_membership(student_id, **_body(_RENEW_FIELDS))
        return jsonify({"message": "Membership renewed", "student": student_to_dict(result)})

    @app.route("/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @staff_or_admin_api
    @json_errors
    def students_delete(student_id: int):
        result = container.membership_service.delete_student(student_id)
        return jsonify({"message": "Student deleted", "student": student_to_dict(result)})
