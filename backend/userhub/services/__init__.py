"""Services Layer — business rules between the routes and the stores.

Invariants:
    - Services raise AppError subclasses only; routes never see raw store exceptions
"""
