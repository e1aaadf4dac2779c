"""Infrastructure Layer — stores, external clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/ or services/
    - Every stateful component is an explicitly constructed instance (no module singletons)

Design Decisions:
    - In-memory stores stand in for a database; the notifier stands in for an external API
"""
