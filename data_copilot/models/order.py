"""Order ORM — a customer order with line items.

Invariants:
    - status defaults to OrderStatus.New
    - customer/employee/shipper/invoice references are optional
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.core.domain_types import OrderStatus
from data_copilot.models.base_object import BaseObject


class Order(BaseObject):
    __tablename__ = "orders"

    order_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today,
    )
    required_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    shipped_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    freight: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0"),
    )
    ship_address: Mapped[str | None] = mapped_column(String(256), nullable=True)
    ship_city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ship_country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, name="order_status"),
        nullable=False, default=OrderStatus.New,
    )

    customer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=True,
    )
    employee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=True,
    )
    shipper_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("shippers.id"), nullable=True,
    )
    invoice_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("invoices.id"), nullable=True,
    )

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="orders",
    )
    employee: Mapped["Employee"] = relationship(
        "Employee", back_populates="orders",
    )
    shipper: Mapped["Shipper"] = relationship(
        "Shipper", back_populates="orders",
    )
    invoice: Mapped["Invoice"] = relationship(
        "Invoice", back_populates="orders",
    )
    order_items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan",
    )
