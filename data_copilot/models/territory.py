"""Territory ORM — sales territory within a region."""

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Territory(BaseObject):
    __tablename__ = "territories"

    name: Mapped[str] = mapped_column(String(64), nullable=False)

    region_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("regions.id"), nullable=True,
    )

    region: Mapped["Region"] = relationship(
        "Region", back_populates="territories",
    )
    employee_territories: Mapped[list["EmployeeTerritory"]] = relationship(
        "EmployeeTerritory", back_populates="territory",
        cascade="all, delete-orphan",
    )
