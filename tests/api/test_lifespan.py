"""Application lifespan — engine opened on startup, released on shutdown."""

import chargebacks.main as main_module
from chargebacks.config import Settings
from chargebacks.core.chargeback import Chargeback
from chargebacks.infrastructure.storage_engine import StorageEngine
from chargebacks.main import app


async def test_lifespan_opens_and_closes_engine(tmp_path, monkeypatch):
    db_path = tmp_path / "nested" / "chargebacks.db"
    settings = Settings(
        db_path=db_path, log_level="INFO", log_format="text", lock_timeout_seconds=0.2,
    )
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)

    async with app.router.lifespan_context(app):
        store = app.state.store
        assert store is not None
        assert store.engine.closed is False
        assert db_path.exists()

        # setup_logging applied INFO; a first create must still report created
        _, created = store.create(Chargeback(id="a", amount=1, currency="USD", reason="r"))
        assert created is True

    assert app.state.store is None
    assert store.engine.closed is True

    # lock released: a second open on the same path succeeds immediately
    with StorageEngine.open(db_path, lock_timeout=0.2) as engine:
        assert engine.health_check() is True
