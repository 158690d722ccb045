"""Chargeback Store — idempotent create / update / delete / get / list over the storage engine.

Invariants:
    - Every operation runs inside EXACTLY ONE engine transaction: check and write
      can never interleave with another writer
    - create is create-once: an existing id returns the STORED record untouched, no write
    - update is compare-before-write: identical mutable fields mean no write and an
      unchanged updated_at; otherwise a full replace and a strictly later updated_at
    - update on an absent id raises NotFoundError and changes nothing
    - delete of an absent id succeeds (the desired end state already holds)
    - list_all returns a list, never None; order is the engine's key order
    - Encode right before every write, decode right after every read; nothing cached
    - No retries here: retrying is the caller's policy

Design Decisions:
    - Rules (stamp/compare/apply) live in core/chargeback.py as pure functions;
      this class is the thin transactional shell around them (ADR: impureim sandwich)
    - Engine injected at construction, clock injectable for deterministic tests
      (ADR: no hidden singletons)
"""

import logging
from datetime import datetime
from typing import Callable

from chargebacks.core.chargeback import (
    Chargeback, ChargebackPayload, apply_payload, payload_matches, stamp_new, utc_now,
)
from chargebacks.core.codec import decode, encode
from chargebacks.core.errors import NotFoundError
from chargebacks.infrastructure.storage_engine import StorageEngine

logger = logging.getLogger(__name__)


class ChargebackStore:
    """Idempotent CRUD for chargebacks. Thread-safe; share one instance per engine."""

    def __init__(
        self, engine: StorageEngine, clock: Callable[[], datetime] = utc_now,
    ):
        self._engine = engine
        self._clock = clock

    @property
    def engine(self) -> StorageEngine:
        return self._engine

    def create(self, candidate: Chargeback) -> tuple[Chargeback, bool]:
        """Persist candidate unless its id already exists.

        Returns (stored, False) when the id was present (every field of the
        candidate is ignored) or (new, True) after the first write.
        """
        with self._engine.write_transaction() as bucket:
            existing = bucket.get(candidate.id)
            if existing is not None:
                logger.debug(
                    f"Create skipped, chargeback {candidate.id} already exists",
                    extra={"chargeback_id": candidate.id, "was_created": False},
                )
                return decode(existing), False

            record = stamp_new(candidate, self._clock())
            bucket.put(record.id, encode(record))

        logger.info(
            f"Chargeback {record.id} created",
            extra={"chargeback_id": record.id, "was_created": True},
        )
        return record, True

    def update(
        self, chargeback_id: str, payload: ChargebackPayload,
    ) -> tuple[Chargeback, bool]:
        """Full-replace the mutable fields if they differ from the stored ones.

        Returns (record, written). Raises NotFoundError if the id is absent.
        """
        with self._engine.write_transaction() as bucket:
            raw = bucket.get(chargeback_id)
            if raw is None:
                raise NotFoundError(chargeback_id)
            stored = decode(raw)

            if payload_matches(stored, payload):
                logger.debug(
                    f"Update skipped, chargeback {chargeback_id} unchanged",
                    extra={"chargeback_id": chargeback_id, "written": False},
                )
                return stored, False

            record = apply_payload(stored, payload, self._clock())
            bucket.put(chargeback_id, encode(record))

        logger.info(
            f"Chargeback {chargeback_id} updated",
            extra={"chargeback_id": chargeback_id, "written": True},
        )
        return record, True

    def delete(self, chargeback_id: str) -> None:
        """Remove the record if present. Deleting an absent id is not an error."""
        with self._engine.write_transaction() as bucket:
            bucket.delete(chargeback_id)
        logger.info(
            f"Chargeback {chargeback_id} deleted (if present)",
            extra={"chargeback_id": chargeback_id},
        )

    def get(self, chargeback_id: str) -> Chargeback:
        with self._engine.read_transaction() as bucket:
            raw = bucket.get(chargeback_id)
            if raw is None:
                raise NotFoundError(chargeback_id)
            return decode(raw)

    def list_all(self) -> list[Chargeback]:
        """Fresh full scan. Empty store -> []."""
        with self._engine.read_transaction() as bucket:
            return [decode(value) for _, value in bucket.items()]
