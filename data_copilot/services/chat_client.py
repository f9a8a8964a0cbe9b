"""Chat Client — adapts a host UI's chat-message list to the chat service.

Invariants:
    - Only the most recent user message is forwarded (empty prompt when there is none)
    - Older turns are not replayed: sessions are single-exchange
    - options is accepted for interface compatibility and never interpreted

Design Decisions:
    - Streaming responses delegate to ask_streaming, one update per chunk
"""

from collections.abc import AsyncIterator, Iterable
from typing import Any

from data_copilot.schemas.chat import ChatMessage, ChatResponse, ChatResponseUpdate
from data_copilot.services.chat_service import ChatService


def last_user_text(messages: Iterable[ChatMessage]) -> str:
    last = ""
    for message in messages:
        if message.role == "user":
            last = message.content
    return last


class ChatClient:
    """Host-facing chat client backed by a ChatService."""

    def __init__(self, service: ChatService):
        self._service = service

    async def get_response(
        self, messages: Iterable[ChatMessage], options: Any = None,
    ) -> ChatResponse:
        reply = await self._service.ask(last_user_text(messages))
        return ChatResponse(
            messages=[ChatMessage(role="assistant", content=reply)],
            model=self._service.current_model,
        )

    async def get_streaming_response(
        self, messages: Iterable[ChatMessage], options: Any = None,
    ) -> AsyncIterator[ChatResponseUpdate]:
        prompt = last_user_text(messages)
        stream = self._service.ask_streaming(prompt)
        try:
            async for chunk in stream:
                yield ChatResponseUpdate(text=chunk)
        finally:
            await stream.aclose()
