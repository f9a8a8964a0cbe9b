"""ToolCall ORM — logging table for tool invocations made by the assistant.

Invariants:
    - Every recorded tool call (success or error) gets one row
    - Infrastructure table: excluded from schema discovery, never exposed as an entity

Design Decisions:
    - Logging table, not enforcement: observability only, no business logic depends on it
    - JSON column for input: flexible schema for varied tool signatures
    - result_preview truncated: tool output can be large, the log only needs a glimpse
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from data_copilot.db.base import Base


class ToolCall(Base):
    """ToolCall log entry: one row per assistant tool invocation."""
    __tablename__ = "tool_calls"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    tool_name: Mapped[str] = mapped_column(String(50), nullable=False)
    tool_input: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    result_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_error: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
