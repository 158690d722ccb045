"""Chargeback Codec — deterministic bytes <-> Chargeback conversion for the storage bucket.

Invariants:
    - encode is deterministic: sorted keys, compact separators, UTF-8
    - Encoded field set is exactly {id, amount, currency, reason, createdAt, updatedAt}
    - Timestamps are ISO-8601 UTC with microseconds — round-trip is exact
    - decode raises DecodeError on ANY malformed, truncated, or mistyped input;
      it never returns a partially filled record

Design Decisions:
    - JSON over a binary format: the stored bytes equal the wire shape (camelCase keys),
      so a value pulled out of the file with sqlite3 reads like an API response
    - bool is rejected as an amount even though it subclasses int
"""

import json
from datetime import datetime, timezone

from chargebacks.core.chargeback import Chargeback
from chargebacks.core.domain_types import ChargebackId, CurrencyCode, MinorUnits
from chargebacks.core.errors import DecodeError

_FIELDS: tuple[str, ...] = (
    "id", "amount", "currency", "reason", "createdAt", "updatedAt",
)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_timestamp(name: str, raw: object) -> datetime:
    if not isinstance(raw, str):
        raise DecodeError(f"{name} must be a string, got {type(raw).__name__}")
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise DecodeError(f"{name} is not an ISO-8601 timestamp: {raw!r}")
    if value.tzinfo is None:
        raise DecodeError(f"{name} has no UTC offset: {raw!r}")
    return value.astimezone(timezone.utc)


def _require_str(doc: dict, name: str) -> str:
    value = doc[name]
    if not isinstance(value, str):
        raise DecodeError(f"{name} must be a string, got {type(value).__name__}")
    return value


def chargeback_to_dict(record: Chargeback) -> dict:
    """JSON-safe dict in wire shape. Pure, no IO."""
    return {
        "id": record.id,
        "amount": record.amount,
        "currency": record.currency,
        "reason": record.reason,
        "createdAt": _format_timestamp(record.created_at),
        "updatedAt": _format_timestamp(record.updated_at),
    }


def encode(record: Chargeback) -> bytes:
    """Serialize a chargeback for storage. Same record -> same bytes."""
    return json.dumps(
        chargeback_to_dict(record),
        sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    ).encode("utf-8")


def decode(data: bytes) -> Chargeback:
    """Parse stored bytes back into a Chargeback, or raise DecodeError."""
    try:
        doc = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(str(e))
    if not isinstance(doc, dict):
        raise DecodeError(f"expected a JSON object, got {type(doc).__name__}")

    missing = [name for name in _FIELDS if name not in doc]
    if missing:
        raise DecodeError(f"missing field(s): {', '.join(missing)}")

    amount = doc["amount"]
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise DecodeError(f"amount must be an integer, got {type(amount).__name__}")

    created_at = _parse_timestamp("createdAt", doc["createdAt"])
    updated_at = _parse_timestamp("updatedAt", doc["updatedAt"])
    if updated_at < created_at:
        raise DecodeError("updatedAt precedes createdAt")

    return Chargeback(
        id=ChargebackId(_require_str(doc, "id")),
        amount=MinorUnits(amount),
        currency=CurrencyCode(_require_str(doc, "currency")),
        reason=_require_str(doc, "reason"),
        created_at=created_at,
        updated_at=updated_at,
    )
