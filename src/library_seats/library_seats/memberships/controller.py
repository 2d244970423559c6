from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import add_months, format_iso_date, today_local
from ..container import Container
from ..core.constants import RENEWAL_DEFAULT_MONTHS
from ..core.enums import Role
from ..core.exceptions import DomainError, NotFoundError
from ..users.guards import admin_page, staff_or_admin_page
from .forms import edit_form_to_update, renew_form_to_renewal

logger = logging.getLogger(__name__)

_CSV_FIELDS = ["id", "name", "email", "phone", "branch_name", "membership_end", "due_amount", "remark"]


def register(app: Flask, container: Container) -> None:
    def _current_user() -> dict:
        return {"full_name": session.get("name"), "role": session.get("role")}

    def _write_expired_csv(results, *, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        for r in results:
            s = r.student
            writer.writerow(
                {
                    "id": s.student_id,
                    "name": s.name,
                    "email": s.email or "",
                    "phone": s.phone or "",
                    "branch_name": s.branch_name or "",
                    "membership_end": format_iso_date(s.membership_end),
                    "due_amount": f"{s.due_amount:.2f}",
                    "remark": s.remark or "",
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _seat_choices(shift_id: Optional[int], student_id: int):
        return container.catalog_service.available_seats(shift_id, student_id=student_id)

    def _load_student(student_id: int):
        try:
            return container.membership_service.get_student(student_id)
        except NotFoundError:
            return None

    @app.route("/admin/memberships/expired", methods=["GET"], endpoint="expired_memberships")
    @staff_or_admin_page
    def expired_memberships():
        q = (request.args.get("q") or "").strip()
        branch_s = (request.args.get("branch_id") or "").strip()
        branch_id = int(branch_s) if branch_s.isdecimal() else None

        results = container.membership_service.list_expired(branch_id=branch_id, search=q or None)

        if request.args.get("format") == "csv":
            filename = f"expired_memberships_{today_local().strftime('%Y%m%d')}.csv"
            return _write_expired_csv(results, filename=filename)

        return render_template(
            "memberships/expired.html",
            students=results,
            q=q,
            branches=container.catalog_service.list_branches(),
            selected_branch_id=branch_id,
            is_admin=session.get("role") == Role.ADMIN.value,
            current_user=_current_user(),
            active_page="expired_memberships",
        )

    @app.route("/admin/students/<int:student_id>/renew", methods=["GET", "POST"], endpoint="renew_membership")
    @admin_page
    def renew_membership(student_id: int):
        result = _load_student(student_id)
        if result is None:
            flash("Student not found", "danger")
            return redirect(url_for("expired_memberships"))

        student = result.student
        shifts = container.catalog_service.list_shifts()
        current_shift = student.assignments[0].shift_id if student.assignments else None
        current_seat = student.assignments[0].seat_id if student.assignments else None
        today = today_local()

        form = {
            "membership_start": today.strftime("%Y-%m-%d"),
            "membership_end": add_months(today, RENEWAL_DEFAULT_MONTHS).strftime("%Y-%m-%d"),
            "email": student.email or "",
            "phone": student.phone or "",
            "shift_id": str(current_shift or ""),
            "seat_id": str(current_seat or ""),
            "total_fee": f"{student.total_fee:.2f}" if student.total_fee else "",
            "cash": "",
            "online": "",
            "security_money": f"{student.security_money:.2f}" if student.security_money else "",
            "remark": student.remark or "",
        }

        if request.method == "POST":
            form.update({k: request.form.get(k, "") for k in form})
            try:
                renewal = renew_form_to_renewal(request.form, known_shift_ids=[s.shift_id for s in shifts])
                container.membership_service.renew_membership(student_id, **renewal)
                flash(f"Membership renewed for {student.name}", "success")
                return redirect(url_for("expired_memberships"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Renewal failed for student id=%s", student_id)
                flash("Failed to renew membership", "danger")
        elif request.args.get("shift_id", "").isdecimal():
            form["shift_id"] = request.args["shift_id"]

        shift_id = int(form["shift_id"]) if form["shift_id"].isdecimal() else None
        return render_template(
            "memberships/renew.html",
            student=student,
            form=form,
            shifts=shifts,
            seats=_seat_choices(shift_id, student.student_id),
            current_user=_current_user(),
            active_page="expired_memberships",
        )

    @app.route("/admin/students/<int:student_id>/edit", methods=["GET", "POST"], endpoint="edit_student")
    @staff_or_admin_page
    def edit_student(student_id: int):
        result = _load_student(student_id)
        if result is None:
            flash("Student not found", "danger")
            return redirect(url_for("expired_memberships"))

        student = result.student
        shifts = container.catalog_service.list_shifts()
        branches = container.catalog_service.list_branches()

        form = {
            "name": student.name or "",
            "email": student.email or "",
            "phone": student.phone or "",
            "address": student.address or "",
            "branch_id": str(student.branch_id or ""),
            "membership_start": format_iso_date(student.membership_start) or "",
            "membership_end": format_iso_date(student.membership_end) or "",
            "total_fee": f"{student.total_fee:.2f}",
            "cash": f"{student.cash:.2f}",
            "online": f"{student.online:.2f}",
            "security_money": f"{student.security_money:.2f}",
            "shift_id": str(student.assignments[0].shift_id) if student.assignments else "",
            "seat_id": str(student.assignments[0].seat_id) if student.assignments else "",
            "remark": student.remark or "",
        }

        if request.method == "POST":
            form.update({k: request.form.get(k, "") for k in form})
            try:
                update = edit_form_to_update(request.form, known_shift_ids=[s.shift_id for s in shifts])
                container.membership_service.update_student(student_id, **update)
                flash("Student updated successfully", "success")
                return redirect(url_for("edit_student", student_id=student_id))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Update failed for student id=%s", student_id)
                flash("Failed to update student", "danger")
        elif request.args.get("shift_id", "").isdecimal():
            form["shift_id"] = request.args["shift_id"]

        shift_id = int(form["shift_id"]) if form["shift_id"].isdecimal() else None
        return render_template(
            "students/edit.html",
            student=student,
            form=form,
            shifts=shifts,
            branches=branches,
            seats=_seat_choices(shift_id, student.student_id),
            current_user=_current_user(),
            active_page="expired_memberships",
        )

    @app.route("/admin/students/<int:student_id>/delete", methods=["POST"], endpoint="delete_student")
    @staff_or_admin_page
    def delete_student(student_id: int):
        try:
            container.membership_service.delete_student(student_id)
            flash("Student deleted successfully.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Delete failed for student id=%s", student_id)
            flash("Failed to delete student.", "danger")

        return redirect(url_for("expired_memberships"))
