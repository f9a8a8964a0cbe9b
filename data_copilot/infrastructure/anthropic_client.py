"""Resilient Anthropic Client — wraps AsyncAnthropic with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection, 529 overload): bounded retries with backoff
    - Timeouts and client errors (4xx except 429): immediate failure, no retry
    - Streaming calls are never retried; SDK errors are mapped, not swallowed
    - All failures mapped to AnthropicAPIError (core/errors.py)
    - system / tools are only sent when present

Design Decisions:
    - One classifier (classify_error) feeds both the retry loop and the stream
      mapper, so buffered and streaming calls agree on what an error is
    - SDK-level retries disabled (max_retries=0): this wrapper owns the policy
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - Overload (HTTP 529) detected by status code on APIStatusError
"""

import asyncio
import logging
import random
from contextlib import asynccontextmanager

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from data_copilot.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

_OVERLOADED_STATUS = 529

RATE_LIMIT = "rate_limit"
TIMEOUT = "timeout"
TRANSIENT = "transient"
OVERLOADED = "overloaded"
CLIENT_ERROR = "client_error"

_RETRYABLE = frozenset({RATE_LIMIT, TRANSIENT, OVERLOADED})


def classify_error(error: APIError) -> str:
    """Bucket an SDK error into one of the retry-policy kinds."""
    if isinstance(error, RateLimitError):
        return RATE_LIMIT
    # APITimeoutError subclasses APIConnectionError: check it first
    if isinstance(error, APITimeoutError):
        return TIMEOUT
    if isinstance(error, (APIConnectionError, InternalServerError)):
        return TRANSIENT
    if isinstance(error, APIStatusError) and error.status_code == _OVERLOADED_STATUS:
        return OVERLOADED
    return CLIENT_ERROR


def retry_after_ms(error: APIError) -> int | None:
    """Retry-After header of a 429 response, in milliseconds."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return int(float(value) * 1000)
    except ValueError:
        return None


def _stream_error(
    error: APIError, kind: str, context: ErrorContext | None,
) -> AnthropicAPIError:
    if kind == RATE_LIMIT:
        return AnthropicAPIError(
            "Rate limit exceeded (streaming)", RATE_LIMIT,
            retry_after_ms=retry_after_ms(error), context=context,
        )
    if kind == TIMEOUT:
        return AnthropicAPIError("API timeout during stream", TIMEOUT, context=context)
    if kind == TRANSIENT:
        return AnthropicAPIError(
            f"Connection error during stream: {error}", "connection_error",
            context=context,
        )
    if kind == OVERLOADED:
        return AnthropicAPIError(
            "Anthropic API overloaded (529)", OVERLOADED, context=context,
        )
    return AnthropicAPIError(str(error), CLIENT_ERROR, context=context)


def _request_kwargs(
    model: str,
    max_tokens: int,
    messages: list,
    system: str | None,
    tools: list | None,
) -> dict:
    kwargs: dict = {"model": model, "max_tokens": max_tokens, "messages": messages}
    if system:
        kwargs["system"] = system
    if tools:
        kwargs["tools"] = tools
    return kwargs


class ResilientAnthropicClient:
    """Messages API client with the retry policy above."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 300,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        messages: list,
        system: str | None = None,
        tools: list | None = None,
        context: ErrorContext | None = None,
    ):
        """Create message, retrying rate limits and transient failures."""
        kwargs = _request_kwargs(model, max_tokens, messages, system, tools)
        attempt = 0
        while True:
            try:
                response = await self.client.messages.create(**kwargs)
            except APIError as e:
                kind = classify_error(e)
                if kind not in _RETRYABLE or attempt >= self.max_retries:
                    raise self._final_error(e, kind, context) from e
                delay = self._retry_delay(e, kind, attempt)
                logger.warning(
                    "Anthropic %s, retry after %dms: %s", kind, delay, e,
                    extra={"model": model, "attempt": attempt + 1},
                )
                await asyncio.sleep(delay / 1000)
                attempt += 1
                continue
            usage = response.usage
            logger.info(
                "Anthropic API success",
                extra={
                    "model": model,
                    "attempt": attempt + 1,
                    "input_tokens": usage.input_tokens,
                    "output_tokens": usage.output_tokens,
                },
            )
            return response

    @asynccontextmanager
    async def stream_message(
        self,
        *,
        model: str,
        max_tokens: int,
        messages: list,
        system: str | None = None,
        tools: list | None = None,
        context: ErrorContext | None = None,
    ):
        """Stream message; SDK errors become AnthropicAPIError, never retried.

        Errors raised inside the caller's `async for` propagate through the
        yield and are mapped too. CancelledError passes through.
        """
        kwargs = _request_kwargs(model, max_tokens, messages, system, tools)
        try:
            async with self.client.messages.stream(**kwargs) as stream:
                yield stream
        except APIError as e:
            raise _stream_error(e, classify_error(e), context) from e

    async def close(self) -> None:
        await self.client.close()

    def _final_error(
        self, error: APIError, kind: str, context: ErrorContext | None,
    ) -> AnthropicAPIError:
        if kind == RATE_LIMIT:
            return AnthropicAPIError(
                "Rate limit exceeded after retries", RATE_LIMIT,
                retry_after_ms=retry_after_ms(error), context=context,
            )
        if kind in (TRANSIENT, OVERLOADED):
            return AnthropicAPIError(
                f"Transient failure after {self.max_retries} retries: {error}",
                "connection_error", context=context,
            )
        if kind == TIMEOUT:
            return AnthropicAPIError("API timeout", TIMEOUT, context=context)
        return AnthropicAPIError(str(error), CLIENT_ERROR, context=context)

    def _retry_delay(self, error: APIError, kind: str, attempt: int) -> int:
        if kind == RATE_LIMIT:
            hinted = retry_after_ms(error)
            if hinted:
                return hinted
        # Exponential backoff with ±25% jitter
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
