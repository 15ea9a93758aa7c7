import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from subtrack.accounts import AccountStore
from subtrack.api.deps import get_account_store

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint for load balancer.

    Returns 503 during graceful shutdown so the balancer stops routing traffic.
    """
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "service": "subtrack-backend"},
        )
    return {"status": "healthy", "service": "subtrack-backend"}


@router.get("/ready")
async def readiness_check(store: AccountStore = Depends(get_account_store)):
    """Readiness check - verifies the account store answers."""
    checks = {"account_store": await store.ping()}

    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("readiness_degraded", checks=checks)
    status_code = 200 if all_healthy else 503

    return JSONResponse(
        status_code=status_code,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )
