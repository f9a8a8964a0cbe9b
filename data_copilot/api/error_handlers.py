"""Error Handlers — global exception handlers for the Data Copilot API.

Invariants:
    - DataCopilotError → structured JSON with error code, message, severity, its HTTP status
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details
    - Every body has the same top-level shape: {"error": {code, message, category, severity, ...}}

Design Decisions:
    - Three-layer handler: domain (DataCopilotError), validation (Pydantic), catch-all (Exception)
    - Handlers are module-level coroutines registered with add_exception_handler,
      so tests can call them without an app
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from data_copilot.core.errors import DataCopilotError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(DataCopilotError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_domain_error(request: Request, exc: DataCopilotError) -> JSONResponse:
    # 4xx are caller mistakes, 5xx are ours
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        "DataCopilotError on %s: %s", request.url.path, exc.message,
        extra={"error_code": exc.code},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning("Validation error on %s: %s", request.url.path, details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: the response never carries the exception text."""
    logger.error(
        "Unhandled exception on %s: %s", request.url.path, exc, exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }
