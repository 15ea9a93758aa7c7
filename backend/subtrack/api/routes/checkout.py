"""Hosted checkout route: creates a Stripe Checkout session for a one-off payment."""

import stripe
import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from subtrack.core.config import get_settings

logger = structlog.get_logger(__name__)

router = APIRouter()


# ── Request / Response schemas ──────────────────────────────────────


class CheckoutRequest(BaseModel):
    # The browser sends camelCase; snake_case is accepted too
    model_config = ConfigDict(populate_by_name=True)

    price_id: str | None = Field(default=None, alias="priceId")
    success_url: str | None = Field(default=None, alias="successUrl")
    cancel_url: str | None = Field(default=None, alias="cancelUrl")
    customer_email: str | None = Field(default=None, alias="customerEmail")
    # Threaded through to the checkout.session.completed callback
    client_reference_id: str | None = Field(default=None, alias="clientReferenceId")


class CheckoutResponse(BaseModel):
    url: str


# ── Helpers ─────────────────────────────────────────────────────────


def _get_stripe() -> None:
    """Configure the stripe module with the secret key."""
    settings = get_settings()
    stripe.api_key = settings.stripe_secret_key


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/create-checkout", response_model=CheckoutResponse)
async def create_checkout_session(body: CheckoutRequest):
    """Create a Stripe Checkout session and return its hosted URL."""
    if not body.price_id:
        raise HTTPException(status_code=400, detail="Price ID is required")

    settings = get_settings()
    if not settings.stripe_secret_key:
        logger.error("stripe_secret_key_missing")
        raise HTTPException(status_code=503, detail="Checkout is not configured")
    _get_stripe()

    params = {
        "payment_method_types": ["card"],
        "line_items": [{"price": body.price_id, "quantity": 1}],
        "mode": "payment",
        "success_url": body.success_url or f"{settings.frontend_url}/dashboard?checkout=success",
        "cancel_url": body.cancel_url or f"{settings.frontend_url}/pricing",
    }
    if body.customer_email:
        params["customer_email"] = body.customer_email
    if body.client_reference_id:
        params["client_reference_id"] = body.client_reference_id

    try:
        checkout_session = await stripe.checkout.Session.create_async(**params)
    except stripe.StripeError as exc:
        logger.error("stripe_checkout_failed", error=str(exc), error_type=type(exc).__name__)
        raise HTTPException(status_code=502, detail=exc.user_message or "Payment provider error")

    logger.info(
        "checkout_session_created",
        session_id=checkout_session.id,
        has_client_reference_id=body.client_reference_id is not None,
    )
    return CheckoutResponse(url=checkout_session.url)
