"""Anthropic Assistant — AssistantClient / AssistantSession over the Anthropic Messages API.

Invariants:
    - send() returns as soon as the exchange is scheduled; events follow
    - Every exchange ends with exactly one terminal event: Idle, or Error
    - Streaming mode: one Delta per text delta, then an empty Final per model turn
    - Buffered mode: one Final per model turn that produced text
    - Tool loop bounded by max_iterations (AgentLoopExceededError -> Error event)
    - Tool failures never end the exchange: they go back to the model as text
    - aclose() cancels a running exchange and drops all subscribers

Design Decisions:
    - Exchange runs as a background asyncio task: the chat service consumes events
      through callbacks, exactly as it would from an out-of-process assistant
    - Subscribers iterate over a snapshot: unsubscribing inside a callback is safe
    - Transport injectable: tests drive the session with a scripted mock client
"""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from data_copilot.config import Settings
from data_copilot.core.assistant_protocols import (
    DeltaEvent, ErrorEvent, EventHandler, FinalEvent, IdleEvent,
    SessionConfig, SessionEvent,
)
from data_copilot.core.errors import (
    AgentLoopExceededError, DataCopilotError, ErrorContext, LifecycleError,
)
from data_copilot.infrastructure.anthropic_client import ResilientAnthropicClient
from data_copilot.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)


# -- Response introspection ----------------------------------------------------

def has_tool_use(response: Any) -> bool:
    return any(
        getattr(b, "type", None) == "tool_use"
        for b in response.content
    )


def serialize_content(response: Any) -> list[dict]:
    return [b.model_dump(exclude_none=True) for b in response.content]


def response_text(response: Any) -> str:
    return "".join(
        b.text for b in response.content
        if getattr(b, "type", None) == "text"
    )


def text_delta(event: Any) -> str | None:
    """Text of a content_block_delta/text_delta stream event, else None."""
    if getattr(event, "type", None) != "content_block_delta":
        return None
    delta = event.delta
    if getattr(delta, "type", None) == "text_delta" and delta.text:
        return delta.text
    return None


# -- Session -------------------------------------------------------------------

class AnthropicSession:
    """One ephemeral exchange: prompt in, events out, tools run in between."""

    def __init__(
        self,
        transport: ResilientAnthropicClient,
        config: SessionConfig,
        dispatch: ToolDispatch,
        max_tokens: int = 4096,
        max_iterations: int = 10,
    ):
        self._transport = transport
        self._config = config
        self._dispatch = dispatch
        self._max_tokens = max_tokens
        self._max_iterations = max_iterations
        self._tool_definitions = [t.definition() for t in config.tools or ()]
        self._handlers: list[EventHandler] = []
        self._task: asyncio.Task | None = None
        self._closed = False

    def on(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return unsubscribe

    async def send(self, prompt: str) -> None:
        if self._closed:
            raise LifecycleError("Assistant session is closed")
        if self._task is not None and not self._task.done():
            raise LifecycleError("Assistant session is already running an exchange")
        self._task = asyncio.create_task(self._run_exchange(prompt))

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handlers.clear()
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait([task])

    # -- Exchange --------------------------------------------------------------

    async def _run_exchange(self, prompt: str) -> None:
        messages: list[dict] = [{"role": "user", "content": prompt}]
        try:
            await self._tool_loop(messages)
        except DataCopilotError as e:
            logger.warning(
                "Assistant exchange failed: %s", e.message,
                extra={"error_code": e.code, "model": self._config.model},
            )
            self._emit(ErrorEvent(e.message))
            return
        except Exception as e:
            logger.error(
                "Unexpected error in assistant exchange: %s", e, exc_info=True,
                extra={"model": self._config.model},
            )
            self._emit(ErrorEvent(f"Unexpected error: {e}"))
            return
        self._emit(IdleEvent())

    async def _tool_loop(self, messages: list[dict]) -> None:
        ctx = ErrorContext(model=self._config.model)
        for _ in range(self._max_iterations):
            response = await self._call_model(messages, ctx)
            if not has_tool_use(response):
                return
            messages.append({"role": "assistant", "content": serialize_content(response)})
            messages.append({
                "role": "user",
                "content": await self._execute_tool_blocks(response.content),
            })
        raise AgentLoopExceededError(self._max_iterations, ctx)

    async def _call_model(self, messages: list[dict], ctx: ErrorContext) -> Any:
        kwargs = {
            "model": self._config.model,
            "max_tokens": self._max_tokens,
            "system": self._config.system_message,
            "tools": self._tool_definitions or None,
            "messages": messages,
            "context": ctx,
        }
        if not self._config.streaming:
            response = await self._transport.create_message(**kwargs)
            text = response_text(response)
            if text:
                self._emit(FinalEvent(text))
            return response

        async with self._transport.stream_message(**kwargs) as stream:
            async for event in stream:
                text = text_delta(event)
                if text:
                    self._emit(DeltaEvent(text))
            response = await stream.get_final_message()
        self._emit(FinalEvent(""))
        return response

    async def _execute_tool_blocks(self, content_blocks: list) -> list[dict]:
        tool_results = []
        for block in content_blocks:
            if getattr(block, "type", None) != "tool_use":
                continue
            logger.info(
                "Tool requested: %s", json.dumps(block.input, ensure_ascii=False),
                extra={"tool_name": block.name, "model": self._config.model},
            )
            result, is_error = await self._dispatch.execute(block.name, block.input)
            tool_result = {
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": result,
            }
            if is_error:
                tool_result["is_error"] = True
            tool_results.append(tool_result)
        return tool_results

    def _emit(self, event: SessionEvent) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error("Session event handler raised: %s", e, exc_info=True)


# -- Client --------------------------------------------------------------------

class AnthropicAssistantClient:
    """Long-lived AssistantClient: owns the Anthropic transport, opens sessions."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        *,
        max_tokens: int = 4096,
        max_iterations: int = 10,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 300,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        transport: ResilientAnthropicClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._max_iterations = max_iterations
        self._retry = {
            "max_retries": max_retries,
            "base_delay_ms": base_delay_ms,
            "max_delay_ms": max_delay_ms,
            "timeout_seconds": timeout_seconds,
        }
        self._session_factory = session_factory
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> "AnthropicAssistantClient":
        return cls(
            settings.anthropic_api_key,
            settings.anthropic_base_url,
            max_tokens=settings.assistant_max_tokens,
            max_iterations=settings.assistant_max_tool_iterations,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
            session_factory=session_factory if settings.log_tool_calls else None,
        )

    async def start(self) -> None:
        if self._transport is not None:
            return
        if not self._api_key:
            raise LifecycleError(
                "No Anthropic API key configured (set ANTHROPIC_API_KEY)",
            )
        self._transport = ResilientAnthropicClient(
            self._api_key, base_url=self._base_url, **self._retry,
        )
        logger.info("Anthropic assistant client started")

    async def stop(self) -> None:
        transport, self._transport = self._transport, None
        if transport is not None:
            await transport.close()
            logger.info("Anthropic assistant client stopped")

    async def create_session(self, config: SessionConfig) -> AnthropicSession:
        if self._transport is None:
            raise LifecycleError("Assistant client is not started")
        dispatch = ToolDispatch(config.tools or (), self._session_factory)
        return AnthropicSession(
            self._transport, config, dispatch,
            max_tokens=self._max_tokens,
            max_iterations=self._max_iterations,
        )

    async def aclose(self) -> None:
        await self.stop()
