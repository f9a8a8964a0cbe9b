"""Category ORM — product grouping."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Category(BaseObject):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)

    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="category",
    )
