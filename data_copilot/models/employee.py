"""Employee ORM — sales staff with a reporting hierarchy.

Invariants:
    - reports_to is a self-reference (many-to-one); direct_reports is its inverse
    - full_name is computed, not persisted
"""

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Employee(BaseObject):
    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str | None] = mapped_column(String(64), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    email: Mapped[str | None] = mapped_column(String(128), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    department_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("departments.id"), nullable=True,
    )
    reports_to_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=True,
    )

    department: Mapped["Department"] = relationship(
        "Department", back_populates="employees",
    )
    reports_to: Mapped["Employee"] = relationship(
        "Employee", remote_side="Employee.id", back_populates="direct_reports",
    )
    direct_reports: Mapped[list["Employee"]] = relationship(
        "Employee", back_populates="reports_to",
    )
    territories: Mapped[list["EmployeeTerritory"]] = relationship(
        "EmployeeTerritory", back_populates="employee",
        cascade="all, delete-orphan",
    )
    orders: Mapped[list["Order"]] = relationship(
        "Order", back_populates="employee",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
