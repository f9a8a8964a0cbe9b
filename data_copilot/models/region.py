"""Region ORM — top-level sales geography."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from data_copilot.models.base_object import BaseObject


class Region(BaseObject):
    __tablename__ = "regions"

    name: Mapped[str] = mapped_column(String(64), nullable=False)

    territories: Mapped[list["Territory"]] = relationship(
        "Territory", back_populates="region",
    )
