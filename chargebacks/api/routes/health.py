"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the storage engine is closed or unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Reads app.state directly instead of Depends(get_store): a missing store is a
      "not ready" answer here, not a 500
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from chargebacks import __version__

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "chargebacks-api",
        "version": __version__,
    }


@router.get("/ready")
def readiness_check(request: Request):
    """Readiness probe — includes a storage read transaction."""
    store = getattr(request.app.state, "store", None)
    storage_ok = store.engine.health_check() if store is not None else False
    if not storage_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
            },
        )
    return {"status": "ready", "checks": {"storage": "healthy"}}
