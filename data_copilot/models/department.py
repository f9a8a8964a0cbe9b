"""Department ORM — organizational unit employees belong to."""

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Department(BaseObject):
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    location: Mapped[str | None] = mapped_column(String(128), nullable=True)
    budget: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0"),
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )

    employees: Mapped[list["Employee"]] = relationship(
        "Employee", back_populates="department",
    )
