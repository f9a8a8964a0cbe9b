"""Invoice ORM — billing document grouping one or more orders."""

from datetime import date

from sqlalchemy import Date, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.core.domain_types import InvoiceStatus
from data_copilot.models.base_object import BaseObject


class Invoice(BaseObject):
    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(32), nullable=False)
    invoice_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[InvoiceStatus] = mapped_column(
        Enum(InvoiceStatus, name="invoice_status"),
        nullable=False, default=InvoiceStatus.Draft,
    )

    orders: Mapped[list["Order"]] = relationship(
        "Order", back_populates="invoice",
    )
