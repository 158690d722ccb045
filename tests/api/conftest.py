"""API test fixtures — FastAPI test client backed by a real per-test store.

Invariants:
    - get_store dependency overridden to use the tmp_path store fixture
    - Lifespan is NOT run by ASGITransport: no settings-driven file is ever opened
"""

import pytest
from httpx import ASGITransport, AsyncClient

from chargebacks.api.deps import get_store
from chargebacks.main import app


@pytest.fixture
async def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_store] = lambda: store
    app.state.store = store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.store = None
