"""Value Coercion — converts free text from tool arguments to typed property values.

Invariants:
    - None passes through unchanged
    - Optional targets: blank/whitespace text becomes None
    - Enums parse by member NAME, case-insensitive
    - Dates use the fixed YYYY-MM-DD format; numbers use locale-free parsing
    - Every failure raises ConversionError carrying the underlying message

Design Decisions:
    - Explicit type ladder instead of a registry: the supported set is small and
      the order matters (bool must be checked before int, datetime before date)
    - Generic fallback target(value) keeps custom column types usable
"""

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from data_copilot.core.errors import ConversionError

DATE_FORMAT = "%Y-%m-%d"

_TRUE_TOKENS = frozenset({"true"})
_FALSE_TOKENS = frozenset({"false"})


def coerce_value(
    value: str | None,
    target: type,
    optional: bool = False,
    property_name: str | None = None,
):
    """Convert `value` to `target`. Raises ConversionError on failure."""
    if value is None:
        return None
    if optional and not value.strip():
        return None
    try:
        return _convert(value, target)
    except ConversionError:
        raise
    except (ValueError, TypeError, InvalidOperation, ArithmeticError) as e:
        raise ConversionError(
            value, friendly_type_name(target), _reason(e), property_name,
        ) from e


def _convert(value: str, target: type):
    if target is str:
        return value
    if isinstance(target, type) and issubclass(target, Enum):
        return _parse_enum(value, target)
    if target is datetime:
        return _parse_datetime(value)
    if target is date:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    if target is bool:
        return _parse_bool(value)
    if target is int:
        return int(value.strip())
    if target is Decimal:
        return Decimal(value.strip())
    if target is float:
        return float(value.strip())
    if target is uuid.UUID:
        return uuid.UUID(value.strip())
    return target(value)


def _parse_enum(value: str, enum_type: type[Enum]) -> Enum:
    wanted = value.strip().lower()
    for member in enum_type:
        if member.name.lower() == wanted:
            return member
    names = ", ".join(m.name for m in enum_type)
    raise ValueError(f"Valid values: {names}")


def _parse_datetime(value: str) -> datetime:
    text = value.strip()
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        return datetime.fromisoformat(text)


def _parse_bool(value: str) -> bool:
    token = value.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ValueError("Expected 'true' or 'false'")


def _reason(error: Exception) -> str:
    message = str(error)
    if isinstance(error, InvalidOperation):
        return "Not a valid decimal number."
    return message


_FRIENDLY_NAMES = {
    str: "string",
    int: "int",
    float: "float",
    Decimal: "decimal",
    bool: "bool",
    date: "date",
    datetime: "datetime",
    uuid.UUID: "uuid",
}


def friendly_type_name(python_type: type, optional: bool = False) -> str:
    """Short, model-readable type name ('decimal', 'date?', 'OrderStatus')."""
    name = _FRIENDLY_NAMES.get(python_type, getattr(python_type, "__name__", str(python_type)))
    return f"{name}?" if optional else name
