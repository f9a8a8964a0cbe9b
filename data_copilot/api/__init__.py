"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (SSE for streaming chat)

Design Decisions:
    - Thin routes delegate to services composed by the lifespan
"""
