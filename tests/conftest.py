"""Root conftest — shared test configuration and storage fixtures.

Invariants:
    - Every test that touches storage gets its own SQLite file under tmp_path
    - Engines opened by fixtures are always closed (file lock released)
    - FakeClock makes timestamps deterministic; tick() advances it explicitly
    - Root logger level and handlers are restored after every test (setup_logging
      in the lifespan must not leak into later tests)
"""

import logging
import os
from datetime import datetime, timedelta, timezone

import pytest

from chargebacks.core.chargeback import Chargeback
from chargebacks.infrastructure.storage_engine import StorageEngine
from chargebacks.services.chargeback_store import ChargebackStore

os.environ.setdefault("LOG_FORMAT", "text")


class FakeClock:
    """Callable clock for ChargebackStore; starts at a fixed UTC instant."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float = 1.0) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def _make_chargeback(
    chargeback_id: str = "cb-1",
    amount: int = 1000,
    currency: str = "USD",
    reason: str = "duplicate charge",
) -> Chargeback:
    return Chargeback(
        id=chargeback_id, amount=amount, currency=currency, reason=reason,
    )


@pytest.fixture
def make_chargeback():
    return _make_chargeback


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "chargebacks.db"


@pytest.fixture
def engine(db_path):
    eng = StorageEngine.open(db_path, lock_timeout=0.2)
    yield eng
    eng.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(engine, clock):
    return ChargebackStore(engine, clock=clock)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo any setup_logging() a test triggers (e.g. via the app lifespan).

    Only plain StreamHandlers added during the test are removed; pytest's own
    capture handlers come and go per phase and are left alone.
    """
    root = logging.getLogger()
    level, before = root.level, list(root.handlers)
    yield
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler and handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
