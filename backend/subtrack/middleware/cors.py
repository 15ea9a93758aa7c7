"""CORS for browser-facing routes.

The payment callback is server-to-server; preflight requests to it must
reach CallbackEndpoint (and its 405) instead of being answered here.
"""

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send

CORS_EXEMPT_PATHS = frozenset({"/api/webhook"})


class BrowserCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that passes exempt paths straight through."""

    def __init__(self, app, exempt_paths=CORS_EXEMPT_PATHS, **kwargs):
        super().__init__(app, **kwargs)
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def setup_cors_middleware(app: FastAPI, origins: list[str]) -> None:
    """Allow the front end's origins on every route except the payment callback."""
    app.add_middleware(
        BrowserCORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


__all__ = ["setup_cors_middleware", "BrowserCORSMiddleware", "CORS_EXEMPT_PATHS"]
