"""Core Layer — pure domain logic, no IO, no async, no app state.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic (clock values passed in)

Design Decisions:
    - Functional core separated from imperative shell
"""
