"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)

Design Decisions:
    - Separate from models and core descriptors: schemas are API contracts
"""
