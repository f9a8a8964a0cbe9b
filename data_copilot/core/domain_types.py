"""Domain Types — enumerations shared by the business model and the tool layer.

Invariants:
    - Member NAMES are the user-facing vocabulary (coercion parses by name,
      formatting renders by name)
    - Member values are stable integers persisted in the database

Design Decisions:
    - IntEnum over str Enum: the order workflow has a natural ordering
      (New < Processing < Shipped < Delivered)
"""

from enum import Enum, IntEnum


class OrderStatus(IntEnum):
    """Order workflow states."""
    New = 0
    Processing = 1
    Shipped = 2
    Delivered = 3
    Cancelled = 4


class InvoiceStatus(IntEnum):
    """Invoice lifecycle states."""
    Draft = 0
    Sent = 1
    Paid = 2
    Overdue = 3
    Cancelled = 4


class OrchestratorState(str, Enum):
    """Chat service start-up states. One-way except for a failed start."""
    NOT_STARTED = "not_started"
    STARTING = "starting"
    STARTED = "started"
