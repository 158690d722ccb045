"""Core Layer — pure domain logic: the chargeback record, its rules, its codec, its errors.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure; the clock is passed in, never read here (except utc_now itself)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
