"""Checks run on the HTML forms before anything reaches MembershipService.

Each function returns the keyword arguments for the matching service call, or
raises ValidationError with the first problem found.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..common.validators import is_blank, parse_date_field, parse_money
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value or ""))


def _text(form: Mapping[str, Any], name: str) -> str:
    return str(form.get(name) or "").strip()


def _optional_int(value: str) -> Optional[int]:
    return int(value) if value.isdecimal() and int(value) > 0 else None


def _form_money(form: Mapping[str, Any], name: str, label: str):
    try:
        return parse_money(_text(form, name), label)
    except ValidationError:
        raise ValidationError(f"{label} must be a non-negative number")


def _valid_shift(form: Mapping[str, Any], known_shift_ids: Iterable[int]) -> int:
    shift_id = _optional_int(_text(form, "shift_id"))
    if shift_id is None or shift_id not in set(known_shift_ids):
        raise ValidationError("Please select a valid shift")
    return shift_id


def edit_form_to_update(form: Mapping[str, Any], *, known_shift_ids: Iterable[int]) -> dict:
    name = _text(form, "name")
    email = _text(form, "email")
    phone = _text(form, "phone")
    address = _text(form, "address")

    if not name:
        raise ValidationError("Name is required")
    if not email:
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if not phone:
        raise ValidationError("Phone number is required")
    if not address:
        raise ValidationError("Address is required")

    branch_id = _optional_int(_text(form, "branch_id"))
    if branch_id is None:
        raise ValidationError("Branch is required")

    if is_blank(form.get("membership_start")) or is_blank(form.get("membership_end")):
        raise ValidationError("Membership dates are required")
    start = parse_date_field(_text(form, "membership_start"), "membership_start")
    end = parse_date_field(_text(form, "membership_end"), "membership_end")
    if start >= end:
        raise ValidationError("Membership End date must be after Membership Start date")

    if not _text(form, "total_fee"):
        raise ValidationError("Total Fee must be a non-negative number")
    total_fee = _form_money(form, "total_fee", "Total Fee")
    cash = _form_money(form, "cash", "Cash Payment")
    online = _form_money(form, "online", "Online Payment")
    security_money = _form_money(form, "security_money", "Security Money")

    shift_id = _valid_shift(form, known_shift_ids)

    return {
        "name": name,
        "email": email,
        "phone": phone,
        "address": address,
        "branch_id": branch_id,
        "membership_start": start,
        "membership_end": end,
        "total_fee": total_fee,
        "amount_paid": cash + online,
        "shift_ids": [shift_id],
        "seat_id": _optional_int(_text(form, "seat_id")),
        "cash": cash,
        "online": online,
        "security_money": security_money,
        "remark": _text(form, "remark"),
    }


def renew_form_to_renewal(form: Mapping[str, Any], *, known_shift_ids: Iterable[int]) -> dict:
    required = ("membership_start", "membership_end", "email", "phone", "shift_id", "total_fee")
    if any(not _text(form, name) for name in required):
        raise ValidationError("Please fill all required fields")

    start = parse_date_field(_text(form, "membership_start"), "membership_start")
    end = parse_date_field(_text(form, "membership_end"), "membership_end")
    shift_id = _valid_shift(form, known_shift_ids)

    return {
        "membership_start": start,
        "membership_end": end,
        "email": _text(form, "email"),
        "phone": _text(form, "phone"),
        "shift_ids": [shift_id],
        "seat_id": _optional_int(_text(form, "seat_id")),
        "total_fee": _form_money(form, "total_fee", "Total Fee"),
        "cash": _form_money(form, "cash", "Cash Payment"),
        "online": _form_money(form, "online", "Online Payment"),
        "security_money": _form_money(form, "security_money", "Security Money"),
        "remark": _text(form, "remark") or None,
    }
