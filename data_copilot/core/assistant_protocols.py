"""Assistant Protocols — contracts between the chat service and the assistant backend.

Invariants:
    - A session pushes exactly these event kinds: Delta, Final, Error, Idle
    - Idle or Error terminates an exchange; events after the first terminal
      event are ignored by consumers
    - Handlers registered with on() must not block: they run in the backend's
      dispatch context
    - Tools are text-in/text-out: handlers take the model's JSON input dict and
      return plain text, success or failure

Design Decisions:
    - Protocol over ABC: structural subtyping, any backend (Anthropic, fakes in
      tests) satisfies it without inheritance
    - Events as frozen dataclasses: a tagged union the chat service dispatches
      on with isinstance
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, Union


# ─── Session events ─────────────────────────────────────────────

@dataclass(frozen=True)
class DeltaEvent:
    """Incremental fragment of an in-progress assistant response."""
    content: str


@dataclass(frozen=True)
class FinalEvent:
    """Completed assistant message. Content may be empty when already streamed."""
    content: str


@dataclass(frozen=True)
class ErrorEvent:
    """The remote exchange failed."""
    message: str


@dataclass(frozen=True)
class IdleEvent:
    """The remote exchange completed and the session is idle."""


SessionEvent = Union[DeltaEvent, FinalEvent, ErrorEvent, IdleEvent]
EventHandler = Callable[[SessionEvent], None]


# ─── Tools and session configuration ────────────────────────────

ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec:
    """A model-callable tool: Anthropic tool_use schema + async text handler."""
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler = field(compare=False, repr=False)

    def definition(self) -> dict[str, Any]:
        """Tool definition in Anthropic tool_use format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


@dataclass(frozen=True)
class SessionConfig:
    """Per-session settings captured when the session is opened."""
    model: str
    streaming: bool
    tools: tuple[ToolSpec, ...] | None = None
    system_message: str | None = None


# ─── Backend contracts ──────────────────────────────────────────

class AssistantSession(Protocol):
    """One ephemeral conversational exchange."""

    def on(self, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to events. Returns an unsubscribe callable."""
        ...

    async def send(self, prompt: str) -> None:
        """Submit the prompt. Returns once accepted; events follow."""
        ...

    async def aclose(self) -> None:
        """Dispose the session."""
        ...


class AssistantClient(Protocol):
    """Long-lived connection to the assistant backend."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def create_session(self, config: SessionConfig) -> AssistantSession: ...

    async def aclose(self) -> None: ...
