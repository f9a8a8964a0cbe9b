"""Record Formatting — verifies scalar rendering and one-line record output.

Tests:
    - Scalars: None -> N/A, dates ISO, decimals two places, enums by name
    - Records: properties in declared order, singular refs by label, collections skipped
"""

from datetime import date, datetime
from decimal import Decimal

from data_copilot.core.domain_types import OrderStatus
from data_copilot.core.format_records import format_record, format_value
from data_copilot.core.schema_types import EntityInfo, PropertyInfo, RelationshipInfo


class _Customer:
    def __init__(self, company_name):
        self.company_name = company_name


class _Order:
    def __init__(self, freight, status, customer, items=()):
        self.freight = freight
        self.status = status
        self.customer = customer
        self.order_items = list(items)


ORDER_ENTITY = EntityInfo(
    name="Order",
    python_type=_Order,
    properties=(
        PropertyInfo("freight", "decimal", Decimal, True),
        PropertyInfo("status", "OrderStatus", OrderStatus, True, ("New", "Shipped")),
    ),
    relationships=(
        RelationshipInfo("customer", "Customer", _Customer, False),
        RelationshipInfo("order_items", "OrderItem", object, True),
    ),
)


def test_format_value_scalars():
    assert format_value(None) == "N/A"
    assert format_value(date(2024, 1, 5)) == "2024-01-05"
    assert format_value(datetime(2024, 1, 5, 13, 45)) == "2024-01-05"
    assert format_value(Decimal("3.5")) == "3.50"
    assert format_value(2.0) == "2.00"
    assert format_value(OrderStatus.Shipped) == "Shipped"
    assert format_value(7) == "7"
    assert format_value(True) == "True"


def test_format_record_renders_properties_and_reference():
    order = _Order(Decimal("32.38"), OrderStatus.New, _Customer("Alfreds Futterkiste"))
    assert format_record(order, ORDER_ENTITY) == (
        "freight: 32.38 | status: New | customer: Alfreds Futterkiste"
    )


def test_format_record_omits_missing_reference_and_collections():
    order = _Order(Decimal("1"), OrderStatus.Shipped, None, items=[object()])
    line = format_record(order, ORDER_ENTITY)
    assert line == "freight: 1.00 | status: Shipped"
    assert "order_items" not in line
