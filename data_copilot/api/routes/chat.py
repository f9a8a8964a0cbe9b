"""Chat Routes — buffered and SSE chat, model selection, UI defaults.

Invariants:
    - POST /chat returns one assistant message (buffered)
    - POST /chat/stream emits {"type": "delta"} events then exactly one "done" event
    - A DataCopilotError mid-stream becomes its SSE error envelope before "done"
    - PUT /chat/model only accepts models from AVAILABLE_MODELS (400 otherwise)

Design Decisions:
    - StreamingResponse for SSE: event_generator yields formatted SSE lines
    - Client disconnect cancels the generator; the chat service disposes the session
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from data_copilot.api.dependencies import get_chat_client, get_chat_service
from data_copilot.core.errors import ArgumentError, DataCopilotError
from data_copilot.schemas.chat import (
    ChatDefaultsResponse, ChatRequest, ChatResponse, ModelSelection,
    ModelsResponse, PromptSuggestion,
)
from data_copilot.services.chat_client import ChatClient
from data_copilot.services.chat_defaults import (
    AVAILABLE_MODELS, EMPTY_STATE_TEXT, HEADER_TEXT, PROMPT_SUGGESTIONS,
    is_available_model,
)
from data_copilot.services.chat_service import ChatService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

# SSE headers prevent proxy/browser buffering of streamed events.
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest, client: ChatClient = Depends(get_chat_client),
):
    """Buffered chat: one prompt in, the whole reply out."""
    return await client.get_response(body.messages)


@router.post("/stream")
async def chat_stream(
    body: ChatRequest, client: ChatClient = Depends(get_chat_client),
):
    """SSE chat: reply chunks as they arrive."""

    async def event_generator():
        error = False
        try:
            async for update in client.get_streaming_response(body.messages):
                yield _sse_line({"type": "delta", "data": update.text})
        except asyncio.CancelledError:
            logger.info("Client disconnected from chat stream")
            raise
        except DataCopilotError as e:
            logger.warning(
                "Chat stream failed: %s", e.message,
                extra={"error_code": e.code},
            )
            error = True
            yield _sse_line(e.to_sse_event())
        yield _sse_line(_done_event(error))

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


@router.get("/models", response_model=ModelsResponse)
async def list_models(service: ChatService = Depends(get_chat_service)):
    return ModelsResponse(
        current=service.current_model, available=list(AVAILABLE_MODELS),
    )


@router.put("/model", response_model=ModelsResponse)
async def select_model(
    body: ModelSelection, service: ChatService = Depends(get_chat_service),
):
    """Switch the model used by subsequent chats."""
    if not is_available_model(body.model):
        raise ArgumentError(
            f"Model '{body.model}' is not available. "
            f"Available: {', '.join(AVAILABLE_MODELS)}",
            "model",
        )
    service.current_model = body.model
    logger.info("Assistant model switched", extra={"model": body.model})
    return ModelsResponse(current=service.current_model, available=list(AVAILABLE_MODELS))


@router.get("/defaults", response_model=ChatDefaultsResponse)
async def chat_defaults(service: ChatService = Depends(get_chat_service)):
    return ChatDefaultsResponse(
        header_text=HEADER_TEXT,
        empty_state_text=EMPTY_STATE_TEXT,
        prompt_suggestions=[
            PromptSuggestion(title=s.title, text=s.text, prompt=s.prompt)
            for s in PROMPT_SUGGESTIONS
        ],
        streaming=service.streaming,
    )


def _done_event(error: bool) -> dict:
    return {"type": "done", "data": {"error": error}}


def _sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
