"""Chargeback Record — the sole persisted entity and the pure rules that stamp and mutate it.

Invariants:
    - Chargeback is frozen: callers only ever hold copies, the store owns persisted bytes
    - updated_at >= created_at always
    - created_at is set once by stamp_new and never touched again
    - apply_payload is a FULL replace of amount/currency/reason (PUT, not PATCH):
      zero and empty values are real values, never "unset"
    - apply_payload strictly advances updated_at, even if the clock did not move

Design Decisions:
    - Pure functions, no IO: the store (shell) owns transactions, this module owns the rules
      (ADR: impureim sandwich)
    - Only MUTABLE_FIELDS take part in write-avoidance; id and timestamps are not
      client-supplied. Adding a mutable field means adding it to MUTABLE_FIELDS.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from chargebacks.core.domain_types import ChargebackId, CurrencyCode, MinorUnits

MUTABLE_FIELDS: tuple[str, ...] = ("amount", "currency", "reason")

# Smallest step the codec can represent (ISO-8601 microseconds)
TIMESTAMP_RESOLUTION = timedelta(microseconds=1)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChargebackPayload:
    """The three client-mutable fields, always fully populated."""
    amount: MinorUnits
    currency: CurrencyCode
    reason: str


@dataclass(frozen=True)
class Chargeback:
    """A financial dispute record keyed by its client-supplied id."""
    id: ChargebackId
    amount: MinorUnits
    currency: CurrencyCode
    reason: str
    created_at: datetime = _EPOCH
    updated_at: datetime = _EPOCH

    @property
    def payload(self) -> ChargebackPayload:
        return ChargebackPayload(
            amount=self.amount, currency=self.currency, reason=self.reason,
        )


def stamp_new(candidate: Chargeback, now: datetime) -> Chargeback:
    """First-time creation: created_at == updated_at == now (UTC)."""
    now = now.astimezone(timezone.utc)
    return replace(candidate, created_at=now, updated_at=now)


def payload_matches(stored: Chargeback, payload: ChargebackPayload) -> bool:
    """Field-by-field comparison of the mutable fields. Pure."""
    return all(
        getattr(stored, name) == getattr(payload, name)
        for name in MUTABLE_FIELDS
    )


def apply_payload(
    stored: Chargeback, payload: ChargebackPayload, now: datetime,
) -> Chargeback:
    """Replace all mutable fields and advance updated_at.

    The new updated_at is never earlier than one TIMESTAMP_RESOLUTION step
    after the previous one, so a fast clock or a clock stepped backwards
    still yields a strictly increasing value.
    """
    now = now.astimezone(timezone.utc)
    floor = stored.updated_at + TIMESTAMP_RESOLUTION
    return replace(
        stored,
        amount=payload.amount,
        currency=payload.currency,
        reason=payload.reason,
        updated_at=max(now, floor),
    )
