"""Record Formatting — renders business objects as single tool-result lines.

Invariants:
    - One record per line: "prop: value | prop: value | ref: Label"
    - Singular references rendered by display label, never recursively
    - Collections are never rendered (would explode the token budget)

Design Decisions:
    - Pure functions over catalog descriptors: no ORM imports in core
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from data_copilot.core.display_label import display_label
from data_copilot.core.schema_types import EntityInfo


def format_value(value: object) -> str:
    """Compact, locale-free rendering of a scalar value."""
    if value is None:
        return "N/A"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (Decimal, float)):
        return f"{value:.2f}"
    if isinstance(value, Enum):
        return value.name
    return str(value)


def format_record(obj: object, entity: EntityInfo) -> str:
    """Format one object as pipe-separated 'property: value' pairs."""
    parts = [
        f"{prop.name}: {format_value(prop.read(obj))}"
        for prop in entity.properties
    ]
    for rel in entity.singular_relationships():
        ref = rel.read(obj)
        if ref is not None:
            parts.append(f"{rel.property_name}: {display_label(ref)}")
    return " | ".join(parts)
