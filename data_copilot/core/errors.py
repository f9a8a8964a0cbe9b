"""Error Hierarchy — typed, categorized exceptions for all Data Copilot failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Tool-input errors (ArgumentError, NotFoundError, ConversionError) are rendered
      as text by the tool engine, never raised to the model
    - to_response() produces REST envelope; to_sse_event() produces SSE envelope

Design Decisions:
    - Single hierarchy with DataCopilotError base: FastAPI global handler catches all
    - ArgumentError is also a ValueError: callers outside the app can catch it idiomatically
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONVERSION = "conversion"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    LIFECYCLE = "lifecycle"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_name: str | None = None
    entity_name: str | None = None
    model: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None

    def public_fields(self) -> dict:
        """Fields safe to return to API clients (no debug_info, no user text)."""
        return {
            "tool_name": self.tool_name,
            "entity_name": self.entity_name,
            "model": self.model,
            "retry_after_ms": self.retry_after_ms,
        }


class DataCopilotError(Exception):
    """Base exception for all Data Copilot errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": self.context.public_fields(),
            }
        }

    def to_sse_event(self) -> dict:
        """Convert to SSE error event."""
        return {
            "type": "error",
            "data": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "severity": self.severity.value,
                "recoverable": self.severity in (
                    ErrorSeverity.INFO, ErrorSeverity.WARNING,
                ),
                "tool_name": self.context.tool_name,
            },
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class ArgumentError(DataCopilotError, ValueError):
    """A required argument is missing, blank, or outside its allowed values."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument


class NotFoundError(DataCopilotError):
    """Unknown entity, unmatched property key, or unresolved reference."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConversionError(DataCopilotError):
    """A text value cannot be coerced to a property's type."""
    def __init__(
        self,
        value: str,
        type_name: str,
        reason: str,
        property_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        target = f"'{property_name}' ({type_name})" if property_name else type_name
        super().__init__(
            f"Cannot convert '{value}' to {target}. {reason}".rstrip(),
            "CONVERSION_ERROR", ErrorCategory.CONVERSION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value
        self.type_name = type_name
        self.reason = reason
        self.property_name = property_name


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DataCopilotError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class AnthropicAPIError(DataCopilotError):
    """Anthropic API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Anthropic API error ({api_error_type}): {message}",
            "ANTHROPIC_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


class RemoteSessionError(DataCopilotError):
    """The assistant session reported an error event."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REMOTE_SESSION_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )


class LifecycleError(DataCopilotError):
    """Assistant client could not be started, stopped, or was already shut down."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "LIFECYCLE_ERROR", ErrorCategory.LIFECYCLE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class AgentLoopExceededError(DataCopilotError):
    """Assistant exchange exceeded the maximum tool-calling iterations."""
    def __init__(self, max_iterations: int, context: ErrorContext | None = None):
        super().__init__(
            f"Assistant exceeded maximum tool iteration limit ({max_iterations})",
            "AGENT_LOOP_EXCEEDED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
