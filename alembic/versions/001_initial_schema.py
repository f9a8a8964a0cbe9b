"""Initial schema — order management entities and the tool call log.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUS = ("New", "Processing", "Shipped", "Delivered", "Cancelled")
INVOICE_STATUS = ("Draft", "Sent", "Paid", "Overdue", "Cancelled")


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("optimistic_lock_field", sa.Integer, nullable=False, server_default="0"),
    ]


def _fk(column: str, target: str, nullable: bool = True) -> sa.Column:
    return sa.Column(column, sa.Uuid, sa.ForeignKey(f"{target}.id"), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "regions", *_base_columns(),
        sa.Column("name", sa.String(64), nullable=False),
    )
    op.create_table(
        "territories", *_base_columns(),
        sa.Column("name", sa.String(64), nullable=False),
        _fk("region_id", "regions"),
    )
    op.create_table(
        "departments", *_base_columns(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("code", sa.String(16), nullable=True),
        sa.Column("location", sa.String(128), nullable=True),
        sa.Column("budget", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "employees", *_base_columns(),
        sa.Column("first_name", sa.String(64), nullable=False),
        sa.Column("last_name", sa.String(64), nullable=False),
        sa.Column("title", sa.String(64), nullable=True),
        sa.Column("hire_date", sa.Date, nullable=True),
        sa.Column("email", sa.String(128), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        _fk("department_id", "departments"),
        _fk("reports_to_id", "employees"),
    )
    op.create_table(
        "employee_territories", *_base_columns(),
        _fk("employee_id", "employees", nullable=False),
        _fk("territory_id", "territories", nullable=False),
    )
    op.create_table(
        "categories", *_base_columns(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("description", sa.String(512), nullable=True),
    )
    op.create_table(
        "suppliers", *_base_columns(),
        sa.Column("company_name", sa.String(128), nullable=False),
        sa.Column("contact_name", sa.String(64), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("email", sa.String(128), nullable=True),
        sa.Column("address", sa.String(256), nullable=True),
        sa.Column("city", sa.String(64), nullable=True),
        sa.Column("country", sa.String(64), nullable=True),
    )
    op.create_table(
        "products", *_base_columns(),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("units_in_stock", sa.Integer, nullable=False, server_default="0"),
        sa.Column("discontinued", sa.Boolean, nullable=False, server_default=sa.false()),
        _fk("category_id", "categories"),
        _fk("supplier_id", "suppliers"),
    )
    op.create_table(
        "shippers", *_base_columns(),
        sa.Column("company_name", sa.String(128), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
    )
    op.create_table(
        "customers", *_base_columns(),
        sa.Column("company_name", sa.String(128), nullable=False),
        sa.Column("contact_name", sa.String(64), nullable=True),
        sa.Column("contact_title", sa.String(64), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("email", sa.String(128), nullable=True),
        sa.Column("address", sa.String(256), nullable=True),
        sa.Column("city", sa.String(64), nullable=True),
        sa.Column("country", sa.String(64), nullable=True),
    )
    op.create_table(
        "invoices", *_base_columns(),
        sa.Column("invoice_number", sa.String(32), nullable=False),
        sa.Column("invoice_date", sa.Date, nullable=False),
        sa.Column("due_date", sa.Date, nullable=True),
        sa.Column(
            "status", sa.Enum(*INVOICE_STATUS, name="invoice_status"),
            nullable=False, server_default="Draft",
        ),
    )
    op.create_table(
        "orders", *_base_columns(),
        sa.Column("order_date", sa.Date, nullable=False),
        sa.Column("required_date", sa.Date, nullable=True),
        sa.Column("shipped_date", sa.Date, nullable=True),
        sa.Column("freight", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("ship_address", sa.String(256), nullable=True),
        sa.Column("ship_city", sa.String(64), nullable=True),
        sa.Column("ship_country", sa.String(64), nullable=True),
        sa.Column(
            "status", sa.Enum(*ORDER_STATUS, name="order_status"),
            nullable=False, server_default="New",
        ),
        _fk("customer_id", "customers"),
        _fk("employee_id", "employees"),
        _fk("shipper_id", "shippers"),
        _fk("invoice_id", "invoices"),
    )
    op.create_table(
        "order_items", *_base_columns(),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("discount", sa.Numeric(5, 2), nullable=False, server_default="0"),
        _fk("order_id", "orders"),
        _fk("product_id", "products"),
    )
    op.create_table(
        "tool_calls",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("tool_name", sa.String(50), nullable=False),
        sa.Column("tool_input", sa.JSON, nullable=True),
        sa.Column("result_preview", sa.Text, nullable=True),
        sa.Column("is_error", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    for table in (
        "tool_calls", "order_items", "orders", "invoices", "customers",
        "shippers", "products", "suppliers", "categories",
        "employee_territories", "employees", "departments",
        "territories", "regions",
    ):
        op.drop_table(table)
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_name in ("order_status", "invoice_status"):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
