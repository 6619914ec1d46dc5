"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Response schemas are built from core entities via from_entity()

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
