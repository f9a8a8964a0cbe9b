"""Chat Service — session orchestrator over one long-lived assistant client.

Invariants:
    - Client start is single-flight: concurrent first callers trigger exactly one start()
    - State is one-way NOT_STARTED -> STARTING -> STARTED; a failed start returns to
      NOT_STARTED so a later call may retry
    - Empty/whitespace prompts are rejected before any external resource is touched
    - Each ask / ask_streaming call opens its own ephemeral session and disposes it
      exactly once, on every exit path (success, error, cancellation, early close)
    - The first terminal event (Error or Idle) decides the outcome; later events are ignored
    - ask_streaming raises a remote error only after the delivered chunks were drained
    - shutdown() is idempotent and never raises because stop() failed

Design Decisions:
    - Event callbacks only hand events to the loop (call_soon_threadsafe): a backend
      may push from any thread and the callback never blocks it
    - Unbounded asyncio.Queue for streaming: the producer is never back-pressured,
      the single consumer drains at its own pace
    - Cancellation is the caller's task cancellation: nothing here polls a flag
    - ask always opens a buffered session, ask_streaming a streaming one; the
      streaming field is the host's preferred mode (reported by /chat/defaults)
    - Runtime fields (current_model, tools, system_message) are plain attributes
      read when a session opens: changes apply to the next call only
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from data_copilot.core.assistant_protocols import (
    AssistantClient, AssistantSession, DeltaEvent, ErrorEvent, FinalEvent,
    IdleEvent, SessionConfig, SessionEvent, ToolSpec,
)
from data_copilot.core.domain_types import OrchestratorState
from data_copilot.core.errors import (
    ArgumentError, ErrorContext, LifecycleError, RemoteSessionError,
)

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


def _validate_prompt(prompt: str) -> None:
    if not isinstance(prompt, str) or not prompt.strip():
        raise ArgumentError("Prompt must not be empty", "prompt")


class ChatService:
    """Buffered and streaming asks against an AssistantClient."""

    def __init__(
        self,
        client: AssistantClient,
        model: str,
        *,
        tools: Sequence[ToolSpec] | None = None,
        system_message: str | None = None,
        streaming: bool = False,
    ):
        self._client = client
        self.current_model = model
        self.tools = tools
        self.system_message = system_message
        self.streaming = streaming
        self._state = OrchestratorState.NOT_STARTED
        self._start_lock: asyncio.Lock | None = asyncio.Lock()
        self._ever_started = False
        self._shut_down = False

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    async def __aenter__(self) -> "ChatService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()

    # -- Lifecycle -------------------------------------------------------------

    async def ensure_started(self) -> None:
        """Start the client once. Concurrent callers wait for the same start."""
        self._check_alive()
        if self._state is OrchestratorState.STARTED:
            return
        async with self._start_lock:
            self._check_alive()
            if self._state is OrchestratorState.STARTED:
                return
            self._state = OrchestratorState.STARTING
            try:
                await self._client.start()
            except asyncio.CancelledError:
                self._state = OrchestratorState.NOT_STARTED
                raise
            except Exception as e:
                self._state = OrchestratorState.NOT_STARTED
                raise LifecycleError(
                    f"Failed to start assistant client: {e}",
                ) from e
            self._state = OrchestratorState.STARTED
            self._ever_started = True
            logger.info("Assistant client started", extra={"model": self.current_model})

    async def shutdown(self) -> None:
        """Stop (best effort) and release the client. Safe to call repeatedly."""
        if self._shut_down:
            return
        self._shut_down = True
        if self._ever_started:
            try:
                await self._client.stop()
            except Exception as e:
                logger.warning(
                    "Failed to stop assistant client cleanly: %s", e,
                    extra={"error_code": "LIFECYCLE_ERROR"},
                )
        await self._client.aclose()
        self._start_lock = None
        logger.info("Chat service shut down")

    def _check_alive(self) -> None:
        if self._shut_down:
            raise LifecycleError("Chat service has been shut down")

    # -- Exchanges -------------------------------------------------------------

    async def ask(self, prompt: str) -> str:
        """Send one prompt and return the full assistant reply."""
        _validate_prompt(prompt)
        await self.ensure_started()

        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[str] = loop.create_future()
        buffer: list[str] = []

        def apply(event: SessionEvent) -> None:
            if outcome.done():
                return
            if isinstance(event, (DeltaEvent, FinalEvent)):
                buffer.append(event.content)
            elif isinstance(event, ErrorEvent):
                outcome.set_exception(self._remote_error(event))
            elif isinstance(event, IdleEvent):
                outcome.set_result("".join(buffer))

        async with self._open_session(False) as session:
            unsubscribe = session.on(
                lambda event: loop.call_soon_threadsafe(apply, event),
            )
            try:
                await session.send(prompt)
                return await outcome
            finally:
                unsubscribe()

    async def ask_streaming(self, prompt: str) -> AsyncIterator[str]:
        """Yield reply chunks as they arrive. Raises a remote error after draining."""
        _validate_prompt(prompt)
        await self.ensure_started()

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[object] = asyncio.Queue()
        errors: list[RemoteSessionError] = []
        finished = False

        def apply(event: SessionEvent) -> None:
            nonlocal finished
            if finished:
                return
            if isinstance(event, DeltaEvent):
                queue.put_nowait(event.content)
            elif isinstance(event, FinalEvent):
                if event.content:
                    queue.put_nowait(event.content)
            elif isinstance(event, ErrorEvent):
                finished = True
                errors.append(self._remote_error(event))
                queue.put_nowait(_END_OF_STREAM)
            elif isinstance(event, IdleEvent):
                finished = True
                queue.put_nowait(_END_OF_STREAM)

        async with self._open_session(True) as session:
            unsubscribe = session.on(
                lambda event: loop.call_soon_threadsafe(apply, event),
            )
            try:
                await session.send(prompt)
                while True:
                    chunk = await queue.get()
                    if chunk is _END_OF_STREAM:
                        break
                    yield chunk
            finally:
                unsubscribe()

        if errors:
            raise errors[0]

    @asynccontextmanager
    async def _open_session(self, streaming: bool) -> AsyncIterator[AssistantSession]:
        config = SessionConfig(
            model=self.current_model,
            streaming=streaming,
            tools=tuple(self.tools) if self.tools else None,
            system_message=self.system_message,
        )
        session = await self._client.create_session(config)
        try:
            yield session
        finally:
            await session.aclose()

    def _remote_error(self, event: ErrorEvent) -> RemoteSessionError:
        logger.warning(
            "Assistant session reported an error: %s", event.message,
            extra={"model": self.current_model, "error_code": "REMOTE_SESSION_ERROR"},
        )
        return RemoteSessionError(
            event.message, ErrorContext(model=self.current_model),
        )
