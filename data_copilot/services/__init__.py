"""Services Layer — schema catalog, data tools, tool dispatch, assistant sessions, chat service.

Invariants:
    - Tool dispatch uses explicit dict mapping (no auto-discovery)
    - Services receive their collaborators through constructors; the FastAPI
      lifespan is the only composer

Design Decisions:
    - One file per responsibility for locality (catalog, tools, orchestrator, adapter)
"""
