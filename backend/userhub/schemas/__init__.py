"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate types at the system boundary; business rules live in services/stores

Design Decisions:
    - Separate from models: schemas are API contracts, models are stored records
"""
