from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import json

import pytest

from wedding_nlq.execute.normalize import columns_for, normalize_value, serialize_row


class _Int64:
    """Stand-in for a NumPy-style scalar."""

    dtype = "int64"

    def __init__(self, value: int) -> None:
        self._value = value

    def item(self) -> int:
        return self._value


def test_aggregate_count_becomes_plain_number() -> None:
    row = serialize_row({"total_guests": Decimal(42)})
    assert row == {"total_guests": 42}
    assert type(row["total_guests"]) is int
    assert json.dumps(row) == '{"total_guests": 42}'


def test_fractional_decimal_becomes_float() -> None:
    assert normalize_value(Decimal("1250.50")) == pytest.approx(1250.5)
    assert isinstance(normalize_value(Decimal("1250.50")), float)


def test_large_count_keeps_magnitude() -> None:
    big = 2**62
    assert normalize_value(Decimal(big)) == big


def test_numpy_style_scalar_is_narrowed() -> None:
    assert normalize_value(_Int64(7)) == 7
    assert type(normalize_value(_Int64(7))) is int


@pytest.mark.parametrize(
    "val",
    [None, True, False, 3, 2.5, "Garcia", datetime(2026, 6, 20, 18, 30)],
)
def test_other_values_pass_through(val: object) -> None:
    assert normalize_value(val) is val


def test_rows_without_wide_numbers_are_unchanged() -> None:
    row = {"family_name": "Garcia", "guests": 4, "attending": None}
    assert serialize_row(row) == row


def test_key_order_is_preserved() -> None:
    row = {"z_last": Decimal(1), "a_first": "x", "m_mid": Decimal("2.5")}
    assert list(serialize_row(row).keys()) == ["z_last", "a_first", "m_mid"]


def test_columns_from_first_row() -> None:
    rows = [{"guest_name": "Ana", "table_name": "T1"}, {"guest_name": "Luis", "table_name": "T2"}]
    assert columns_for(rows) == ["guest_name", "table_name"]
    assert columns_for([]) == []
