"""Shipper ORM — carrier delivering orders."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Shipper(BaseObject):
    __tablename__ = "shippers"

    company_name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    orders: Mapped[list["Order"]] = relationship(
        "Order", back_populates="shipper",
    )
