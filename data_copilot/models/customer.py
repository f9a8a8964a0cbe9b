"""Customer ORM — companies that place orders."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Customer(BaseObject):
    __tablename__ = "customers"

    company_name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contact_title: Mapped[str | None] = mapped_column(String(64), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(128), nullable=True)
    address: Mapped[str | None] = mapped_column(String(256), nullable=True)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)

    orders: Mapped[list["Order"]] = relationship(
        "Order", back_populates="customer",
    )
