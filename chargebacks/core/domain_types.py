"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ChargebackId is the storage key AND the idempotency key — never generated server-side
    - MinorUnits is an integer count of the smallest currency unit (cents for USD)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Integer minor units over float/Decimal: no rounding drift, JSON-native
"""

from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ChargebackId = NewType("ChargebackId", str)


# ─── Value Types ─────────────────────────────────────────────────

MinorUnits = NewType("MinorUnits", int)      # signed
CurrencyCode = NewType("CurrencyCode", str)  # e.g. "USD", "EUR"
