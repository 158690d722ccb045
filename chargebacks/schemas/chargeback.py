"""Chargeback Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ChargebackInput requires amount, currency AND reason: the store never has to guess
      whether a field was "not supplied" (full replace on PUT depends on this)
    - amount is a strict integer (minor units): 10.5, "10" and true are rejected
    - A body "id" is ignored; the path id is authoritative
    - ChargebackResponse serializes with camelCase timestamps (createdAt / updatedAt)

Design Decisions:
    - One input schema for POST and PUT: both carry the same three mutable fields
    - Empty currency/reason are accepted: on PUT they are real values, not "unset"
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from chargebacks.core.chargeback import Chargeback, ChargebackPayload
from chargebacks.core.domain_types import ChargebackId, CurrencyCode, MinorUnits


class ChargebackInput(BaseModel):
    """Create/update body — the three client-mutable fields."""
    model_config = ConfigDict(extra="ignore")

    amount: int = Field(strict=True)
    currency: str = Field(max_length=16)
    reason: str = Field(max_length=2000)

    def to_payload(self) -> ChargebackPayload:
        return ChargebackPayload(
            amount=MinorUnits(self.amount),
            currency=CurrencyCode(self.currency),
            reason=self.reason,
        )

    def to_candidate(self, chargeback_id: str) -> Chargeback:
        return Chargeback(
            id=ChargebackId(chargeback_id),
            amount=MinorUnits(self.amount),
            currency=CurrencyCode(self.currency),
            reason=self.reason,
        )


class ChargebackResponse(BaseModel):
    """Chargeback response — public-facing record data."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    amount: int
    currency: str
    reason: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_record(cls, record: Chargeback) -> "ChargebackResponse":
        return cls(
            id=record.id,
            amount=record.amount,
            currency=record.currency,
            reason=record.reason,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DeleteResponse(BaseModel):
    deleted: str
