"""EmployeeTerritory ORM — link between employees and the territories they cover.

Invariants:
    - Both foreign keys are required (pure association row)
"""

import uuid

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class EmployeeTerritory(BaseObject):
    __tablename__ = "employee_territories"

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=False,
    )
    territory_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("territories.id"), nullable=False,
    )

    employee: Mapped["Employee"] = relationship(
        "Employee", back_populates="territories",
    )
    territory: Mapped["Territory"] = relationship(
        "Territory", back_populates="employee_territories",
    )
