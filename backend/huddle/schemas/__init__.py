"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Every route declares its request schema explicitly

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
