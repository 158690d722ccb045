"""Chargeback Codec — tests for deterministic encoding and strict decoding.

Tests cover:
    - encode is deterministic and uses exactly the six wire fields
    - microsecond timestamps survive encode -> decode exactly
    - decode raises DecodeError on malformed, truncated and mistyped input
"""

import json
from datetime import datetime, timezone

import pytest

from chargebacks.core.chargeback import Chargeback
from chargebacks.core.codec import chargeback_to_dict, decode, encode
from chargebacks.core.errors import DecodeError

RECORD = Chargeback(
    id="a",
    amount=-1250,
    currency="USD",
    reason="dup — ünïcode",
    created_at=datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc),
    updated_at=datetime(2024, 5, 6, 7, 8, 9, 123457, tzinfo=timezone.utc),
)


def _doc(**overrides) -> bytes:
    doc = chargeback_to_dict(RECORD)
    doc.update(overrides)
    return json.dumps(doc).encode()


def test_encode_is_deterministic():
    same = Chargeback(**{f: getattr(RECORD, f) for f in (
        "id", "amount", "currency", "reason", "created_at", "updated_at",
    )})
    assert encode(RECORD) == encode(same)


def test_encode_field_set_is_exact():
    assert set(json.loads(encode(RECORD))) == {
        "id", "amount", "currency", "reason", "createdAt", "updatedAt",
    }


def test_encode_keys_sorted_and_compact():
    raw = encode(RECORD).decode()
    assert raw.startswith('{"amount":-1250,')
    assert ", " not in raw.split('"reason"')[0]


def test_decode_restores_exact_timestamps():
    decoded = decode(encode(RECORD))
    assert decoded == RECORD
    assert decoded.updated_at.microsecond == 123457


def test_encode_whole_second_keeps_microseconds():
    record = Chargeback(
        id="s", amount=1, currency="EUR", reason="r",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    assert json.loads(encode(record))["createdAt"] == "2024-01-01T00:00:00.000000+00:00"


@pytest.mark.parametrize("data", [
    b"",
    b"{",
    encode(RECORD)[:-5],
    b"\xff\xfe",
    b"[]",
    b"null",
])
def test_decode_rejects_malformed_bytes(data):
    with pytest.raises(DecodeError):
        decode(data)


def test_decode_rejects_missing_field():
    doc = chargeback_to_dict(RECORD)
    del doc["reason"]
    with pytest.raises(DecodeError, match="reason"):
        decode(json.dumps(doc).encode())


@pytest.mark.parametrize("amount", [10.5, "10", True, None])
def test_decode_rejects_non_integer_amount(amount):
    with pytest.raises(DecodeError):
        decode(_doc(amount=amount))


def test_decode_rejects_non_string_currency():
    with pytest.raises(DecodeError):
        decode(_doc(currency=840))


def test_decode_rejects_naive_timestamp():
    with pytest.raises(DecodeError):
        decode(_doc(createdAt="2024-05-06T07:08:09"))


def test_decode_rejects_garbage_timestamp():
    with pytest.raises(DecodeError):
        decode(_doc(updatedAt="yesterday"))


def test_decode_rejects_updated_before_created():
    with pytest.raises(DecodeError):
        decode(_doc(updatedAt="2020-01-01T00:00:00.000000+00:00"))


def test_decode_error_is_500_level():
    with pytest.raises(DecodeError) as exc_info:
        decode(b"{")
    assert exc_info.value.http_status == 500
    assert exc_info.value.code == "DECODE_ERROR"
