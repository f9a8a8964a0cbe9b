"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - Readiness also reports the assistant orchestrator state (informational only)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - db_manager looked up at call time: the lifespan assigns it after import
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

import data_copilot.infrastructure.database as db_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "data-copilot-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: includes database connectivity."""
    manager = db_module.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    service = getattr(request.app.state, "chat_service", None)
    assistant = service.state.value if service else "unavailable"
    return {
        "status": "ready",
        "checks": {"database": "healthy", "assistant": assistant},
    }
