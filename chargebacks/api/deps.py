"""Request Dependencies — hands the process-wide ChargebackStore to route handlers.

Invariants:
    - The store is created in the lifespan and lives on app.state (never a module global)
    - A request arriving before startup completed fails with EngineError (500), not AttributeError

Design Decisions:
    - Depends(get_store) over reading app.state in handlers: tests swap the store via
      app.dependency_overrides without touching the lifespan
"""

from fastapi import Request

from chargebacks.core.errors import EngineError
from chargebacks.services.chargeback_store import ChargebackStore


def get_store(request: Request) -> ChargebackStore:
    """FastAPI dependency for the chargeback store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise EngineError("store not initialized", "request")
    return store
