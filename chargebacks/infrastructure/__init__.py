"""Infrastructure Layer — the storage engine and cross-cutting concerns (logging).

Invariants:
    - Infrastructure never imports from services/
    - Every engine failure leaves this layer as an EngineError

Design Decisions:
    - Thin wrappers over SQLAlchemy/SQLite (ADR: single responsibility)
"""
