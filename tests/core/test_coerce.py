"""Value Coercion — verifies text-to-type conversion used by the data tools.

Tests:
    - Scalars: str, int, Decimal, float, bool, date, datetime, uuid
    - Enums by member name, case-insensitive
    - Optional targets turn blank text into None
    - Failures raise ConversionError naming value, property and type
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest

from data_copilot.core.coerce import coerce_value, friendly_type_name
from data_copilot.core.domain_types import OrderStatus
from data_copilot.core.errors import ConversionError


# ==============================================================================
# Successful conversions
# ==============================================================================


def test_string_passes_through_untouched():
    assert coerce_value("  Berlin ", str) == "  Berlin "


def test_integer_and_decimal():
    assert coerce_value(" 42 ", int) == 42
    assert coerce_value("19.95", Decimal) == Decimal("19.95")
    assert coerce_value("2.5", float) == 2.5


def test_bool_accepts_true_false_any_case():
    assert coerce_value("TRUE", bool) is True
    assert coerce_value("false", bool) is False


def test_date_uses_iso_format():
    assert coerce_value("2024-03-15", date) == date(2024, 3, 15)


def test_datetime_accepts_date_only_and_iso():
    assert coerce_value("2024-03-15", datetime) == datetime(2024, 3, 15)
    assert coerce_value("2024-03-15T10:30:00", datetime) == datetime(2024, 3, 15, 10, 30)


def test_uuid():
    value = uuid.uuid4()
    assert coerce_value(str(value), uuid.UUID) == value


def test_enum_by_name_case_insensitive():
    assert coerce_value("shipped", OrderStatus) is OrderStatus.Shipped
    assert coerce_value(" New ", OrderStatus) is OrderStatus.New


def test_none_passes_through():
    assert coerce_value(None, int) is None


def test_optional_blank_becomes_none():
    assert coerce_value("   ", int, optional=True) is None
    assert coerce_value("", date, optional=True) is None


# ==============================================================================
# Failures
# ==============================================================================


def test_invalid_integer_raises_conversion_error():
    with pytest.raises(ConversionError) as exc:
        coerce_value("abc", int, property_name="units_in_stock")
    assert exc.value.value == "abc"
    assert exc.value.property_name == "units_in_stock"
    assert exc.value.message.startswith("Cannot convert 'abc' to 'units_in_stock' (int).")


def test_invalid_decimal_has_friendly_reason():
    with pytest.raises(ConversionError) as exc:
        coerce_value("lots", Decimal)
    assert exc.value.reason == "Not a valid decimal number."
    assert "decimal" in exc.value.message


def test_invalid_enum_lists_valid_names():
    with pytest.raises(ConversionError) as exc:
        coerce_value("Lost", OrderStatus, property_name="status")
    assert "New, Processing, Shipped, Delivered, Cancelled" in exc.value.message


def test_invalid_bool_raises():
    with pytest.raises(ConversionError):
        coerce_value("yes", bool)


def test_required_blank_is_not_none():
    with pytest.raises(ConversionError):
        coerce_value("", int)


def test_wrong_date_format_raises():
    with pytest.raises(ConversionError):
        coerce_value("15/03/2024", date)


# ==============================================================================
# friendly_type_name
# ==============================================================================


def test_friendly_type_names():
    assert friendly_type_name(Decimal) == "decimal"
    assert friendly_type_name(date, optional=True) == "date?"
    assert friendly_type_name(OrderStatus) == "OrderStatus"
