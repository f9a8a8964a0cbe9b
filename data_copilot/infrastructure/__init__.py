"""Infrastructure Layer — database access, the Anthropic transport, and logging setup.

Invariants:
    - Infrastructure never imports from services/
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients: one place owns retries and error mapping
"""
