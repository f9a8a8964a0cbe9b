"""BaseObject — abstract parent of every business entity.

Invariants:
    - id is a UUID primary key generated client-side
    - optimistic_lock_field is bookkeeping: never surfaced by the schema catalog
    - __abstract__: no table, never discovered as an entity

Design Decisions:
    - Generic Uuid type (not the postgresql dialect type): same models run on
      PostgreSQL and on SQLite in tests
"""

import uuid

from sqlalchemy import Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from data_copilot.db.base import Base


class BaseObject(Base):
    """Shared identity and bookkeeping columns."""
    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    optimistic_lock_field: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.id})"
