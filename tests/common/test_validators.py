from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.library_seats.library_seats.common.datetime_utils import add_months, format_iso_date, month_bounds, parse_iso_date
from src.library_seats.library_seats.common.validators import (
    parse_date_field,
    parse_id_list,
    parse_money,
    parse_optional_id,
    require_fields,
)
from src.library_seats.library_seats.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw,expected",
    [("12.50", Decimal("12.50")), (7, Decimal("7")), (0, Decimal("0")), (" 3 ", Decimal("3")), ("", Decimal("0"))],
)
def test_parse_money_accepts(raw, expected):
    assert parse_money(raw, "Cash") == expected


@pytest.mark.parametrize("raw", ["-0.01", "abc", "NaN", "Infinity", True])
def test_parse_money_rejects(raw):
    with pytest.raises(ValidationError, match="Cash must be a valid non-negative number"):
        parse_money(raw, "Cash")


def test_parse_money_blank_uses_default():
    assert parse_money(None, "Total fee", default=Decimal("900")) == Decimal("900")
    assert parse_money("  ", "Total fee", default=Decimal("900")) == Decimal("900")


def test_parse_optional_id():
    assert parse_optional_id("", "seat_id") is None
    assert parse_optional_id(0, "seat_id") is None
    assert parse_optional_id("4", "seat_id") == 4
    with pytest.raises(ValidationError):
        parse_optional_id("four", "seat_id")


def test_parse_id_list_ignores_non_lists():
    assert parse_id_list("1,2", "shift_ids") == []
    assert parse_id_list(None, "shift_ids") == []
    assert parse_id_list(["1", 2], "shift_ids") == [1, 2]
    with pytest.raises(ValidationError):
        parse_id_list(["x"], "shift_ids")


def test_require_fields_uses_given_message():
    require_fields({"a": "x", "b": 0}, "nope")
    with pytest.raises(ValidationError, match="^nope$"):
        require_fields({"a": "x", "b": " "}, "nope")


def test_date_parsing_drops_time_part():
    assert parse_iso_date("2026-03-05T00:00:00.000Z") == date(2026, 3, 5)
    assert parse_date_field(datetime(2026, 3, 5, 8, 0), "d") == date(2026, 3, 5)
    assert parse_date_field(date(2026, 3, 5), "d") == date(2026, 3, 5)


def test_add_months_clamps_day():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 12, 15), 1) == date(2027, 1, 15)


def test_month_bounds_and_format():
    assert month_bounds(date(2028, 2, 10)) == (date(2028, 2, 1), date(2028, 2, 29))
    assert format_iso_date(datetime(2026, 3, 5, 23, 59)) == "2026-03-05"
    assert format_iso_date(None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [("1.005", Decimal("1.01")), ("0.004", Decimal("0.00")), (2.675, Decimal("2.68")), ("99999999.994", Decimal("99999999.99"))],
)
def test_parse_money_rounds_to_cents(raw, expected):
    amount = parse_money(raw, "Cash")

    assert amount == expected
    assert amount.as_tuple().exponent == -2


@pytest.mark.parametrize("raw", ["100000000", "99999999.996", "1e30"])
def test_parse_money_rejects_amounts_beyond_column(raw):
    with pytest.raises(ValidationError, match="Total fee must not exceed 99999999.99"):
        parse_money(raw, "Total fee")
