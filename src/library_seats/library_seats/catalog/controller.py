from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date
from ..container import Container
from ..users.guards import staff_or_admin_api


def _int_arg(*names: str) -> Optional[int]:
    for name in names:
        value = (request.args.get(name) or "").strip()
        if value.isdecimal() and int(value) > 0:
            return int(value)
    return None


def register(app: Flask, container: Container) -> None:
    @app.route("/branches", methods=["GET"], endpoint="branches_list")
    @staff_or_admin_api
    def branches_list():
        branches = container.catalog_service.list_branches()
        return jsonify([{"id": b.branch_id, "name": b.name, "code": b.code} for b in branches])

    @app.route("/schedules", methods=["GET"], endpoint="schedules_list")
    @staff_or_admin_api
    def schedules_list():
        shifts = container.catalog_service.list_shifts()
        return jsonify(
            [
                {
                    "id": s.shift_id,
                    "title": s.title,
                    "time": s.time,
                    "event_date": format_iso_date(s.event_date),
                    "description": s.description,
                }
                for s in shifts
            ]
        )

    @app.route("/seats", methods=["GET"], endpoint="seats_list")
    @staff_or_admin_api
    def seats_list():
        seats = container.catalog_service.list_seats(
            shift_id=_int_arg("shiftId", "shift_id"),
            branch_id=_int_arg("branchId", "branch_id"),
        )
        return jsonify(
            [
                {
                    "id": a.seat.seat_id,
                    "seat_number": a.seat.seat_number,
                    "branch_id": a.seat.branch_id,
                    "shifts": [
                        {
                            "shift_id": st.shift_id,
                            "shift_title": st.shift_title,
                            "is_assigned": st.is_assigned,
                            "student_id": st.student_id,
                            "student_name": st.student_name,
                        }
                        for st in a.shifts
                    ],
                }
                for a in seats
            ]
        )
