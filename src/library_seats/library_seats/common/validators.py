from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

CENT = Decimal("0.01")
# DECIMAL(10,2) upper bound.
MAX_MONEY = Decimal("99999999.99")


def is_blank(value: Any) -> bool:
    """True for None, empty or whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_fields(fields: dict[str, Any], message: str) -> None:
    """Raise one ValidationError listing the contract when any field is blank."""
    if any(is_blank(v) for v in fields.values()):
        raise ValidationError(message)


def parse_money(value: Any, label: str, *, default: Optional[Decimal] = None) -> Decimal:
    """Parse a monetary value (number or decimal string).

    Blank values resolve to ``default`` (zero when no default is given).
    NaN, infinities and negatives are rejected. Amounts are rounded half-up
    to cents and must fit the money columns.
    """
    if is_blank(value):
        return default if default is not None else Decimal("0")
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a valid non-negative number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a valid non-negative number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{label} must be a valid non-negative number")
    check_money_range(amount, label)
    return check_money_range(amount.quantize(CENT, rounding=ROUND_HALF_UP), label)


def check_money_range(amount: Decimal, label: str) -> Decimal:
    if amount > MAX_MONEY:
        raise ValidationError(f"{label} must not exceed {MAX_MONEY}")
    return amount


def parse_optional_id(value: Any, field_name: str) -> Optional[int]:
    """Parse an optional numeric id; blank and 0 mean "not given"."""
    if is_blank(value) or value == 0:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a number")
    return parsed or None


def parse_id_list(values: Any, field_name: str) -> list[int]:
    """Parse a list of ids. Anything that is not a list is treated as empty."""
    if not isinstance(values, (list, tuple)):
        return []
    out: list[int] = []
    for v in values:
        try:
            out.append(int(str(v).strip()))
        except ValueError:
            raise ValidationError(f"{field_name} must contain numbers only")
    return out


def parse_date_field(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def first_or_none(values: Iterable[int]) -> Optional[int]:
    for v in values:
        return v
    return None
