"""Shared test fixtures for all test groups."""

import hashlib
import hmac
import json
import time

import pytest

from subtrack.accounts.memory import InMemoryAccountStore
from subtrack.integrations.stripe_signature import SignatureVerifier
from subtrack.services.entitlement_service import EntitlementApplier
from subtrack.services.webhook_service import CallbackEndpoint

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def sign_payload(webhook_secret):
    """Build a Stripe-Signature header value for a raw body."""

    def _sign(body: bytes, secret: str | None = None, timestamp: int | None = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        signed = f"{ts}.".encode("utf-8") + body
        digest = hmac.new((secret or webhook_secret).encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={ts},v1={digest}"

    return _sign


@pytest.fixture
def make_event_body():
    """Build a raw Stripe event body (compact JSON bytes)."""

    def _make(
        event_type: str = "checkout.session.completed",
        client_reference_id: str | None = "acct_42",
        customer_email: str | None = None,
        session_id: str = "cs_1",
        event_id: str | None = "evt_test_001",
    ) -> bytes:
        event = {
            "type": event_type,
            "data": {
                "object": {
                    "id": session_id,
                    "client_reference_id": client_reference_id,
                    "customer_email": customer_email,
                }
            },
        }
        if event_id is not None:
            event["id"] = event_id
        return json.dumps(event, separators=(",", ":")).encode("utf-8")

    return _make


@pytest.fixture
def memory_store():
    """Account store seeded with two profiles, neither entitled yet."""
    store = InMemoryAccountStore()
    store.add("acct_42", email="owner@example.com")
    store.add("acct_7", email="seven@example.com")
    return store


@pytest.fixture
def verifier(webhook_secret):
    return SignatureVerifier(secret=webhook_secret)


@pytest.fixture
def callback_endpoint(verifier, memory_store):
    return CallbackEndpoint(verifier=verifier, applier=EntitlementApplier(memory_store))
