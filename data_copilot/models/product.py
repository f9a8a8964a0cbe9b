"""Product ORM — sellable item supplied by a supplier."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Product(BaseObject):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0"),
    )
    units_in_stock: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    discontinued: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=True,
    )
    supplier_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("suppliers.id"), nullable=True,
    )

    category: Mapped["Category"] = relationship(
        "Category", back_populates="products",
    )
    supplier: Mapped["Supplier"] = relationship(
        "Supplier", back_populates="products",
    )
    order_items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="product",
    )
