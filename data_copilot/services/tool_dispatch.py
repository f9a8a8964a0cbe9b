"""Tool Dispatch — explicit routing from tool_name to tool handler.

Invariants:
    - Every tool->handler mapping is visible in one dict, built from the ToolSpecs
    - Unknown tools return "Tool 'x' does not exist." text (never raises)
    - Handler faults become "Error executing x: ..." text (never raises)
    - When a session factory is given, every call is logged to the ToolCall table;
      a failed log write is a warning, never an error for the caller

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Tool call logging in its own short session: a logging failure can never roll
      back the data the tool just wrote
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from data_copilot.core.assistant_protocols import ToolHandler, ToolSpec
from data_copilot.models.tool_call import ToolCall

logger = logging.getLogger(__name__)

RESULT_PREVIEW_CHARS = 500


class ToolDispatch:
    """Routes tool_name -> handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        tools: Iterable[ToolSpec],
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self._handlers: dict[str, ToolHandler] = {t.name: t.handler for t in tools}
        self._session_factory = session_factory

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def execute(self, tool_name: str, input_data: dict | None) -> tuple[str, bool]:
        """Run the tool. Returns (result_text, is_error)."""
        input_data = input_data or {}
        handler = self._handlers.get(tool_name)
        if handler is None:
            result, is_error = f"Tool '{tool_name}' does not exist.", True
        else:
            try:
                result, is_error = await handler(input_data), False
            except Exception as e:
                logger.error(
                    "Tool handler raised: %s", e, exc_info=True,
                    extra={"tool_name": tool_name},
                )
                result, is_error = f"Error executing {tool_name}: {e}", True
        await self._log_tool_call(tool_name, input_data, result, is_error)
        return result, is_error

    async def _log_tool_call(
        self, tool_name: str, input_data: dict, result: str, is_error: bool,
    ) -> None:
        if self._session_factory is None:
            return
        try:
            async with self._session_factory() as db:
                db.add(ToolCall(
                    tool_name=tool_name,
                    tool_input=input_data,
                    result_preview=result[:RESULT_PREVIEW_CHARS],
                    is_error=is_error,
                ))
                await db.commit()
        except Exception as e:
            logger.warning(
                "Failed to log tool call '%s': %s", tool_name, e,
                extra={"tool_name": tool_name},
            )
