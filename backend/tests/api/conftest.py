"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from subtrack.api.deps import get_account_store, get_signature_verifier
from subtrack.api.routes import api_router
from subtrack.main import generic_exception_handler, http_exception_handler
from subtrack.middleware.cors import setup_cors_middleware
from subtrack.middleware.correlation import setup_correlation_middleware


@pytest.fixture
def api_app(memory_store, verifier) -> FastAPI:
    """App wired like create_app() but with an in-memory store and test secret."""

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        app.state.shutting_down = False
        yield

    app = FastAPI(title="Subtrack - Test Client", lifespan=test_lifespan)
    setup_cors_middleware(app, ["http://localhost:5173"])
    setup_correlation_middleware(app)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)
    app.include_router(api_router, prefix="/api")

    app.dependency_overrides[get_account_store] = lambda: memory_store
    app.dependency_overrides[get_signature_verifier] = lambda: verifier
    return app


@pytest.fixture
def api_client(api_app):
    with TestClient(api_app, raise_server_exceptions=False) as client:
        yield client
