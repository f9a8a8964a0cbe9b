"""OrderItem ORM — one product line of an order."""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class OrderItem(BaseObject):
    __tablename__ = "order_items"

    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0"),
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Percent, 0-100
    discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0"),
    )

    order_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("orders.id"), nullable=True,
    )
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=True,
    )

    order: Mapped["Order"] = relationship(
        "Order", back_populates="order_items",
    )
    product: Mapped["Product"] = relationship(
        "Product", back_populates="order_items",
    )
