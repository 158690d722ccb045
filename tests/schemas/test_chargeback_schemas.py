"""Chargeback Schemas — boundary validation before anything reaches the store.

Invariants:
    - amount, currency and reason are all required
    - amount must be a real JSON integer (no floats, strings or booleans)
    - empty strings and zero are accepted (full replace on PUT)
    - a body id is ignored; to_candidate uses the path id
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from chargebacks.core.chargeback import Chargeback, ChargebackPayload
from chargebacks.schemas.chargeback import ChargebackInput, ChargebackResponse


# --- ChargebackInput -----------------------------------------------------------

def test_input_accepts_complete_body():
    body = ChargebackInput.model_validate(
        {"amount": 1000, "currency": "USD", "reason": "dup"},
    )
    assert body.to_payload() == ChargebackPayload(1000, "USD", "dup")


@pytest.mark.parametrize("missing", ["amount", "currency", "reason"])
def test_input_rejects_missing_field(missing):
    data = {"amount": 1, "currency": "USD", "reason": "r"}
    del data[missing]
    with pytest.raises(ValidationError):
        ChargebackInput.model_validate(data)


@pytest.mark.parametrize("amount", [10.5, "10", True])
def test_input_rejects_non_integer_amount(amount):
    with pytest.raises(ValidationError):
        ChargebackInput.model_validate(
            {"amount": amount, "currency": "USD", "reason": "r"},
        )


def test_input_accepts_zero_and_empty_values():
    body = ChargebackInput.model_validate({"amount": 0, "currency": "", "reason": ""})
    assert body.to_payload() == ChargebackPayload(0, "", "")


def test_input_accepts_negative_amount():
    body = ChargebackInput.model_validate({"amount": -50, "currency": "EUR", "reason": "r"})
    assert body.amount == -50


def test_input_ignores_body_id():
    body = ChargebackInput.model_validate(
        {"id": "from-body", "amount": 1, "currency": "USD", "reason": "r"},
    )
    candidate = body.to_candidate("from-path")
    assert candidate.id == "from-path"


def test_input_currency_max_length():
    with pytest.raises(ValidationError):
        ChargebackInput.model_validate(
            {"amount": 1, "currency": "X" * 17, "reason": "r"},
        )


# --- ChargebackResponse --------------------------------------------------------

def test_response_serializes_camel_case_timestamps():
    ts = datetime(2024, 1, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    record = Chargeback(
        id="a", amount=1, currency="USD", reason="r", created_at=ts, updated_at=ts,
    )
    data = ChargebackResponse.from_record(record).model_dump(by_alias=True)
    assert set(data) == {"id", "amount", "currency", "reason", "createdAt", "updatedAt"}
    assert data["createdAt"] == ts
