"""FastAPI dependency providers for the payment callback.

Route handlers never build clients at module scope; everything comes in
through these providers so tests can swap them via app.dependency_overrides.
"""

from fastapi import Depends

from subtrack.accounts import AccountStore, build_account_store
from subtrack.core.config import get_settings
from subtrack.integrations.stripe_signature import SignatureVerifier
from subtrack.services.entitlement_service import EntitlementApplier
from subtrack.services.webhook_service import CallbackEndpoint


def get_signature_verifier() -> SignatureVerifier:
    settings = get_settings()
    return SignatureVerifier(
        secret=settings.stripe_webhook_secret,
        tolerance=settings.stripe_webhook_tolerance,
    )


def get_account_store() -> AccountStore:
    return build_account_store(get_settings())


def get_entitlement_applier(store: AccountStore = Depends(get_account_store)) -> EntitlementApplier:
    return EntitlementApplier(store)


def get_callback_endpoint(
    verifier: SignatureVerifier = Depends(get_signature_verifier),
    applier: EntitlementApplier = Depends(get_entitlement_applier),
) -> CallbackEndpoint:
    return CallbackEndpoint(verifier=verifier, applier=applier)
