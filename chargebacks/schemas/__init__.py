"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Schemas convert to core types (Chargeback, ChargebackPayload) before the store sees them

Design Decisions:
    - Separate from core types: schemas are API contracts, core types are the domain (ADR: DDD boundary)
"""
