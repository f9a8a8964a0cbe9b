"""Chat Schemas — Pydantic models for the chat-client boundary and chat routes.

Invariants:
    - ChatMessage.role is one of system / user / assistant
    - ChatRequest carries at least one message
    - ModelSelection.model is stripped and non-empty (membership checked by the route)

Design Decisions:
    - Message list instead of a bare prompt: hosts send the whole transcript, the
      adapter picks the most recent user turn
    - Literal role over str enum: Pydantic handles validation natively
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str = ""


class ChatRequest(BaseModel):
    """Transcript sent by a host UI."""
    messages: list[ChatMessage] = Field(min_length=1)


class ChatResponse(BaseModel):
    """Buffered reply: exactly one assistant message."""
    messages: list[ChatMessage]
    model: str | None = None

    @property
    def text(self) -> str:
        return "".join(m.content for m in self.messages)


class ChatResponseUpdate(BaseModel):
    """One streamed fragment of an assistant reply."""
    role: Role = "assistant"
    text: str


class ModelSelection(BaseModel):
    model: str = Field(min_length=1, max_length=100)

    @field_validator("model")
    @classmethod
    def strip_model(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("model cannot be empty or whitespace")
        return v


class ModelsResponse(BaseModel):
    current: str
    available: list[str]


class PromptSuggestion(BaseModel):
    title: str
    text: str
    prompt: str


class ChatDefaultsResponse(BaseModel):
    header_text: str
    empty_state_text: str
    prompt_suggestions: list[PromptSuggestion]
    streaming: bool
