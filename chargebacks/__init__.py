"""Chargebacks — idempotent persistence for financial-dispute records.

Invariants:
    - Package root exports nothing but the version (import side-effects prohibited)

Design Decisions:
    - Explicit imports only, no star exports
"""

__version__ = "1.0.0"
