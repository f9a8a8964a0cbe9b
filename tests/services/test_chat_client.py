"""Chat Client — verifies the host-facing adapter over ChatService.

Tests:
    - Only the most recent user message is forwarded
    - Buffered reply wrapped as one assistant message carrying the model id
    - Streaming reply yields one update per chunk
"""

import pytest

from data_copilot.core.assistant_protocols import DeltaEvent, FinalEvent, IdleEvent
from data_copilot.core.errors import ArgumentError
from data_copilot.schemas.chat import ChatMessage
from data_copilot.services.chat_client import ChatClient, last_user_text
from data_copilot.services.chat_service import ChatService
from tests.services.fake_assistant import FakeAssistantClient

TRANSCRIPT = [
    ChatMessage(role="system", content="ignored"),
    ChatMessage(role="user", content="first question"),
    ChatMessage(role="assistant", content="first answer"),
    ChatMessage(role="user", content="follow-up"),
    ChatMessage(role="assistant", content="trailing assistant turn"),
]


def test_last_user_text_picks_latest_user_turn():
    assert last_user_text(TRANSCRIPT) == "follow-up"


def test_last_user_text_without_user_turn_is_empty():
    assert last_user_text([ChatMessage(role="assistant", content="hi")]) == ""
    assert last_user_text([]) == ""


async def test_get_response_forwards_latest_prompt():
    fake = FakeAssistantClient(scripts=[[FinalEvent("Here you go."), IdleEvent()]])
    client = ChatClient(ChatService(fake, "claude-haiku-4-5"))

    response = await client.get_response(TRANSCRIPT, options={"temperature": 0})

    assert fake.sessions[0].sent == ["follow-up"]
    assert response.messages == [ChatMessage(role="assistant", content="Here you go.")]
    assert response.model == "claude-haiku-4-5"
    assert response.text == "Here you go."


async def test_get_response_without_user_turn_is_rejected():
    fake = FakeAssistantClient()
    client = ChatClient(ChatService(fake, "claude-haiku-4-5"))
    with pytest.raises(ArgumentError):
        await client.get_response([ChatMessage(role="system", content="x")])


async def test_streaming_response_yields_updates():
    fake = FakeAssistantClient(scripts=[[
        DeltaEvent("Three "), DeltaEvent("orders."), FinalEvent(""), IdleEvent(),
    ]])
    client = ChatClient(ChatService(fake, "claude-haiku-4-5"))

    updates = [u async for u in client.get_streaming_response(TRANSCRIPT)]

    assert [u.text for u in updates] == ["Three ", "orders."]
    assert all(u.role == "assistant" for u in updates)
    assert fake.sessions[0].close_count == 1
