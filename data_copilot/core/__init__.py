"""Core Layer — pure domain logic: descriptors, parsing, coercion, formatting, errors.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO and no database access; functions are deterministic

Design Decisions:
    - Functional core separated from imperative shell: the data tools and the chat
      service are thin async shells over these helpers
"""
