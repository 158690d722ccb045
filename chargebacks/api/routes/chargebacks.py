"""Chargeback Routes — HTTP verbs mapped one-to-one onto ChargebackStore operations.

Invariants:
    - GET    /chargebacks      → list_all(); always a JSON array ([] when empty)
    - GET    /chargebacks/{id} → get(); 404 when absent
    - POST   /chargebacks/{id} → create(); 201 when created, 200 on retry, same body shape
    - PUT    /chargebacks/{id} → update(); 200 + X-Idempotency-Write: true|false, 404 when absent
    - DELETE /chargebacks/{id} → delete(); 200 whether or not the record existed
    - The path id is the idempotency key; a body id is ignored

Design Decisions:
    - Sync handlers: the store blocks until its transaction commits, FastAPI runs
      sync routes in its threadpool (ADR: async wrapping is the caller's concern)
    - No try/except here: ChargebackError propagates to the global handler
      (api/error_handlers.py) which owns the status mapping
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from chargebacks.api.deps import get_store
from chargebacks.schemas.chargeback import (
    ChargebackInput, ChargebackResponse, DeleteResponse,
)
from chargebacks.services.chargeback_store import ChargebackStore

router = APIRouter(prefix="/chargebacks", tags=["chargebacks"])

WRITE_HEADER = "X-Idempotency-Write"

ChargebackIdPath = Annotated[str, Path(min_length=1, max_length=256)]


@router.get("", response_model=list[ChargebackResponse])
def list_chargebacks(store: ChargebackStore = Depends(get_store)):
    """List every chargeback. Pure read — always safe to retry."""
    return [ChargebackResponse.from_record(r) for r in store.list_all()]


@router.get("/{chargeback_id}", response_model=ChargebackResponse)
def get_chargeback(
    chargeback_id: ChargebackIdPath,
    store: ChargebackStore = Depends(get_store),
):
    return ChargebackResponse.from_record(store.get(chargeback_id))


@router.post(
    "/{chargeback_id}", response_model=ChargebackResponse,
    responses={status.HTTP_201_CREATED: {"model": ChargebackResponse}},
)
def create_chargeback(
    chargeback_id: ChargebackIdPath,
    body: ChargebackInput,
    response: Response,
    store: ChargebackStore = Depends(get_store),
):
    """Create-or-fetch by idempotency key.

    First call creates the record (201). Retries return the SAME stored
    record (200) without writing, whatever the retry's body says.
    """
    record, created = store.create(body.to_candidate(chargeback_id))
    response.status_code = (
        status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )
    return ChargebackResponse.from_record(record)


@router.put("/{chargeback_id}", response_model=ChargebackResponse)
def update_chargeback(
    chargeback_id: ChargebackIdPath,
    body: ChargebackInput,
    response: Response,
    store: ChargebackStore = Depends(get_store),
):
    """Full replace of amount/currency/reason; no write when nothing changed."""
    record, written = store.update(chargeback_id, body.to_payload())
    response.headers[WRITE_HEADER] = "true" if written else "false"
    return ChargebackResponse.from_record(record)


@router.delete("/{chargeback_id}", response_model=DeleteResponse)
def delete_chargeback(
    chargeback_id: ChargebackIdPath,
    store: ChargebackStore = Depends(get_store),
):
    """Idempotent delete — 200 even when the record is already gone."""
    store.delete(chargeback_id)
    return DeleteResponse(deleted=chargeback_id)
