"""Subtrack backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# CRITICAL ORDER: configure_structlog MUST be called before all other app imports
# (structlog caches the processor chain on first use).
from subtrack.core.logging import configure_structlog
from subtrack.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from subtrack.api.routes import api_router
from subtrack.core.config import Settings, get_settings
from subtrack.db import close_db, init_db
from subtrack.middleware.cors import setup_cors_middleware
from subtrack.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)

logger = structlog.get_logger(__name__)


def report_missing_configuration(settings: Settings) -> list[str]:
    """Log (but do not fail on) settings the payment endpoints need.

    Requests that depend on a missing value are rejected individually.
    """
    required = {
        "stripe_webhook_secret": settings.stripe_webhook_secret,
        "stripe_secret_key": settings.stripe_secret_key,
    }
    if settings.account_store == "supabase":
        required["supabase_url"] = settings.supabase_url
        required["supabase_service_role_key"] = settings.supabase_service_role_key

    missing = [k for k, v in required.items() if not v]
    if missing:
        logger.warning("configuration_incomplete", missing=missing)
    return missing


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # SIGTERM flips this so the health check returns 503 while draining
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug, account_store=settings.account_store)

    if settings.account_store == "database":
        await init_db()
        logger.info("db_initialized")

    report_missing_configuration(settings)

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Global exception handler for HTTPException with debug_id tracking.

    Logs errors server-side with full context, returns sanitized response to client.
    """
    debug_id = str(uuid.uuid4())
    corr_id = get_correlation_id()

    logger.error(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=corr_id,
        path=request.url.path,
        method=request.method,
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors with debug_id tracking.

    Logs full exception with traceback, returns generic 500 to client.
    """
    debug_id = str(uuid.uuid4())
    corr_id = get_correlation_id()

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=corr_id,
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    # No internal details leaked
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Subscription tracker backend - checkout and payment callbacks",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_cors_middleware(app, [settings.frontend_url, "http://localhost:5173"])

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "subtrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
