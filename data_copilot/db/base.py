"""SQLAlchemy Declarative Base — shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base.registry is the single source of truth the schema catalog discovers

Design Decisions:
    - Separate file for Base: models import it without importing each other
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all Data Copilot ORM models."""
    pass
