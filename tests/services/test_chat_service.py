"""Chat Service (buffered) — verifies lifecycle, ask(), disposal and shutdown.

Tests:
    - Single-flight start under concurrent first calls; failed start is retryable
    - ask() concatenates Delta/Final content until Idle; Error raises RemoteSessionError
    - Events after the first terminal event are ignored
    - Each exchange disposes its session exactly once (success, error, cancellation)
    - Session config reflects runtime model / tools / system message / streaming
    - shutdown() idempotent, best-effort stop, rejects later calls

Design Decisions:
    - FakeAssistantClient scripts events; threaded=True exercises cross-thread delivery
"""

import asyncio

import pytest

from data_copilot.core.assistant_protocols import (
    DeltaEvent, ErrorEvent, FinalEvent, IdleEvent, ToolSpec,
)
from data_copilot.core.domain_types import OrchestratorState
from data_copilot.core.errors import ArgumentError, LifecycleError, RemoteSessionError
from data_copilot.services.chat_service import ChatService
from tests.services.fake_assistant import FakeAssistantClient


def _service(client, **kwargs):
    return ChatService(client, "claude-sonnet-4-5", **kwargs)


async def _noop(input_data):
    return ""


# ==============================================================================
# Lifecycle
# ==============================================================================


async def test_initial_state_is_not_started():
    client = FakeAssistantClient()
    service = _service(client)
    assert service.state is OrchestratorState.NOT_STARTED
    assert client.start_calls == 0


async def test_concurrent_first_calls_start_once():
    client = FakeAssistantClient(start_delay=0.05)
    service = _service(client)

    replies = await asyncio.gather(*(service.ask(f"q{i}") for i in range(5)))

    assert replies == ["ok"] * 5
    assert client.start_calls == 1
    assert service.state is OrchestratorState.STARTED


async def test_ensure_started_is_noop_once_started():
    client = FakeAssistantClient()
    service = _service(client)
    await service.ensure_started()
    await service.ensure_started()
    assert client.start_calls == 1


async def test_failed_start_raises_and_can_retry():
    client = FakeAssistantClient(start_error=RuntimeError("backend unavailable"))
    service = _service(client)

    with pytest.raises(LifecycleError) as exc:
        await service.ask("hello")
    assert exc.value.message == "Failed to start assistant client: backend unavailable"
    assert service.state is OrchestratorState.NOT_STARTED
    assert client.sessions == []

    client.start_error = None
    assert await service.ask("hello") == "ok"
    assert client.start_calls == 2
    assert service.state is OrchestratorState.STARTED


# ==============================================================================
# ask()
# ==============================================================================


async def test_ask_returns_final_content():
    client = FakeAssistantClient(scripts=[[FinalEvent("3 orders are New."), IdleEvent()]])
    service = _service(client)
    assert await service.ask("How many new orders?") == "3 orders are New."
    assert client.sessions[0].sent == ["How many new orders?"]


async def test_ask_concatenates_deltas():
    client = FakeAssistantClient(scripts=[[
        DeltaEvent("Hel"), DeltaEvent("lo"), FinalEvent(""), IdleEvent(),
    ]])
    assert await _service(client).ask("hi") == "Hello"


async def test_ask_delivered_from_another_thread():
    client = FakeAssistantClient(
        scripts=[[DeltaEvent("a"), DeltaEvent("b"), IdleEvent()]], threaded=True,
    )
    assert await _service(client).ask("hi") == "ab"


async def test_ask_ignores_events_after_terminal():
    client = FakeAssistantClient(scripts=[[
        FinalEvent("first"), IdleEvent(), FinalEvent("late"), ErrorEvent("late error"),
    ]])
    assert await _service(client).ask("hi") == "first"


async def test_ask_error_event_raises_remote_error():
    client = FakeAssistantClient(scripts=[[DeltaEvent("partial"), ErrorEvent("rate limited")]])
    service = _service(client)

    with pytest.raises(RemoteSessionError) as exc:
        await service.ask("hi")
    assert exc.value.message == "rate limited"
    assert exc.value.context.model == "claude-sonnet-4-5"
    assert client.sessions[0].close_count == 1


@pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
async def test_empty_prompt_rejected_before_start(prompt):
    client = FakeAssistantClient()
    service = _service(client)

    with pytest.raises(ArgumentError) as exc:
        await service.ask(prompt)
    assert exc.value.argument == "prompt"
    assert client.start_calls == 0
    assert client.sessions == []


async def test_session_disposed_once_after_success():
    client = FakeAssistantClient()
    service = _service(client)
    await service.ask("one")
    await service.ask("two")
    assert [s.close_count for s in client.sessions] == [1, 1]
    assert all(s.handlers == [] for s in client.sessions)


async def test_cancellation_disposes_session_once():
    client = FakeAssistantClient(scripts=[[DeltaEvent("thinking...")]])
    service = _service(client)

    task = asyncio.create_task(service.ask("long question"))
    await asyncio.sleep(0.01)
    assert not task.done()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert client.sessions[0].close_count == 1
    assert service.state is OrchestratorState.STARTED


async def test_session_config_reflects_runtime_settings():
    tool = ToolSpec(name="noop", description="noop", input_schema={}, handler=_noop)
    client = FakeAssistantClient()
    service = _service(client, tools=[tool], system_message="Be brief.", streaming=True)
    service.current_model = "claude-haiku-4-5"

    await service.ask("hi")

    config = client.sessions[0].config
    assert config.model == "claude-haiku-4-5"
    assert config.tools == (tool,)
    assert config.system_message == "Be brief."


async def test_ask_opens_buffered_session_even_when_streaming_preferred():
    client = FakeAssistantClient()
    service = _service(client, streaming=True)

    await service.ask("hi")

    assert client.sessions[0].config.streaming is False
    assert service.streaming is True


async def test_no_tools_means_none_in_config():
    client = FakeAssistantClient()
    await _service(client).ask("hi")
    assert client.sessions[0].config.tools is None
    assert client.sessions[0].config.streaming is False


# ==============================================================================
# shutdown()
# ==============================================================================


async def test_shutdown_stops_and_closes_once():
    client = FakeAssistantClient()
    service = _service(client)
    await service.ask("hi")

    await service.shutdown()
    await service.shutdown()

    assert service.is_shut_down
    assert client.stop_calls == 1
    assert client.aclose_calls == 1


async def test_shutdown_without_start_skips_stop():
    client = FakeAssistantClient()
    service = _service(client)
    await service.shutdown()
    assert client.stop_calls == 0
    assert client.aclose_calls == 1


async def test_shutdown_swallows_stop_failure():
    client = FakeAssistantClient(stop_error=RuntimeError("already gone"))
    service = _service(client)
    await service.ensure_started()
    await service.shutdown()
    assert client.stop_calls == 1
    assert client.aclose_calls == 1


async def test_calls_after_shutdown_are_rejected():
    client = FakeAssistantClient()
    service = _service(client)
    await service.shutdown()

    with pytest.raises(LifecycleError) as exc:
        await service.ask("hi")
    assert exc.value.message == "Chat service has been shut down"
    with pytest.raises(LifecycleError):
        await service.ensure_started()
    assert client.start_calls == 0


async def test_async_context_manager_shuts_down():
    client = FakeAssistantClient()
    async with _service(client) as service:
        assert await service.ask("hi") == "ok"
    assert service.is_shut_down
    assert client.stop_calls == 1
