"""Chat Service (streaming) — verifies ask_streaming() chunk delivery and termination.

Tests:
    - Deltas yielded in order; non-empty Final content yielded, empty Final skipped
    - Error after chunks: chunks delivered first, then RemoteSessionError
    - Early consumer close disposes the session exactly once
    - Streaming sessions always open with streaming=True
"""

import pytest

from data_copilot.core.assistant_protocols import (
    DeltaEvent, ErrorEvent, FinalEvent, IdleEvent,
)
from data_copilot.core.errors import ArgumentError, RemoteSessionError
from data_copilot.services.chat_service import ChatService
from tests.services.fake_assistant import FakeAssistantClient


def _service(client, **kwargs):
    return ChatService(client, "claude-sonnet-4-5", **kwargs)


async def _collect(stream):
    """Collect chunks until the stream ends. Returns (chunks, error)."""
    chunks = []
    try:
        async for chunk in stream:
            chunks.append(chunk)
    except RemoteSessionError as e:
        return chunks, e
    return chunks, None


# ==============================================================================
# Chunk delivery
# ==============================================================================


async def test_yields_deltas_in_order():
    client = FakeAssistantClient(scripts=[[
        DeltaEvent("Found "), DeltaEvent("3 "), DeltaEvent("orders."),
        FinalEvent(""), IdleEvent(),
    ]])
    chunks, error = await _collect(_service(client).ask_streaming("hi"))
    assert chunks == ["Found ", "3 ", "orders."]
    assert error is None


async def test_non_empty_final_is_yielded():
    client = FakeAssistantClient(scripts=[[FinalEvent("whole reply"), IdleEvent()]])
    chunks, _ = await _collect(_service(client).ask_streaming("hi"))
    assert chunks == ["whole reply"]


async def test_idle_without_content_yields_nothing():
    client = FakeAssistantClient(scripts=[[IdleEvent()]])
    chunks, error = await _collect(_service(client).ask_streaming("hi"))
    assert chunks == []
    assert error is None


async def test_threaded_delivery_keeps_order():
    script = [DeltaEvent(str(i)) for i in range(50)] + [IdleEvent()]
    client = FakeAssistantClient(scripts=[script], threaded=True)
    chunks, _ = await _collect(_service(client).ask_streaming("count"))
    assert chunks == [str(i) for i in range(50)]


async def test_events_after_idle_are_ignored():
    client = FakeAssistantClient(scripts=[[
        DeltaEvent("a"), IdleEvent(), DeltaEvent("late"), ErrorEvent("late"),
    ]])
    chunks, error = await _collect(_service(client).ask_streaming("hi"))
    assert chunks == ["a"]
    assert error is None


# ==============================================================================
# Errors
# ==============================================================================


async def test_error_raised_after_chunks_drained():
    client = FakeAssistantClient(scripts=[[
        DeltaEvent("partial "), DeltaEvent("answer"), ErrorEvent("connection lost"),
    ]])
    chunks, error = await _collect(_service(client).ask_streaming("hi"))
    assert chunks == ["partial ", "answer"]
    assert isinstance(error, RemoteSessionError)
    assert error.message == "connection lost"
    assert client.sessions[0].close_count == 1


async def test_blank_prompt_rejected():
    client = FakeAssistantClient()
    with pytest.raises(ArgumentError):
        async for _ in _service(client).ask_streaming("  "):
            pass
    assert client.start_calls == 0


# ==============================================================================
# Disposal and configuration
# ==============================================================================


async def test_early_close_disposes_session_once():
    client = FakeAssistantClient(scripts=[[
        DeltaEvent("first"), DeltaEvent("second"), IdleEvent(),
    ]])
    stream = _service(client).ask_streaming("hi")

    assert await stream.__anext__() == "first"
    await stream.aclose()

    session = client.sessions[0]
    assert session.close_count == 1
    assert session.handlers == []


async def test_completed_stream_disposes_session_once():
    client = FakeAssistantClient()
    await _collect(_service(client).ask_streaming("hi"))
    assert client.sessions[0].close_count == 1


async def test_streaming_session_even_when_service_buffers():
    client = FakeAssistantClient()
    service = _service(client, streaming=False)
    await _collect(service.ask_streaming("hi"))
    assert client.sessions[0].config.streaming is True
