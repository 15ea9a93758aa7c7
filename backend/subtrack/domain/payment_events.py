"""Payment event interpretation.

Pure domain functions: decode a verified Stripe callback body into a tagged
variant. No I/O, fully deterministic.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from subtrack.core.exceptions import ParseError
from subtrack.integrations.stripe_signature import VerifiedRequest

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


# ── Wire schemas ────────────────────────────────────────────────────


class EventData(BaseModel):
    object: dict[str, Any]


class EventEnvelope(BaseModel):
    """Outer Stripe event. ``id`` is optional: hand-built test events omit it."""

    id: StrictStr | None = None
    type: StrictStr
    data: EventData


class CheckoutSessionObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    client_reference_id: StrictStr | None = None
    customer_email: StrictStr | None = None


# ── Interpreted variants ────────────────────────────────────────────


@dataclass(frozen=True)
class PaymentEvent:
    """A completed checkout that should grant an entitlement."""

    kind: str
    account_ref: str | None
    email: str | None
    session_id: str
    event_id: str | None
    raw: bytes

    @property
    def is_identifiable(self) -> bool:
        return bool(self.account_ref or self.email)


@dataclass(frozen=True)
class IgnoredEvent:
    """Any other event kind. Acknowledged, never acted on."""

    kind: str
    event_id: str | None
    raw: bytes


def _present(value: str | None) -> str | None:
    # Empty strings carry no identity
    return value or None


def interpret(verified: VerifiedRequest) -> PaymentEvent | IgnoredEvent:
    """Decode a verified body into PaymentEvent or IgnoredEvent.

    Raises:
        ParseError: the body is not JSON or does not match the event schema
    """
    try:
        envelope = EventEnvelope.model_validate_json(verified.body)
    except ValidationError as exc:
        raise ParseError(f"Invalid event envelope: {exc.error_count()} error(s)") from exc

    if envelope.type != CHECKOUT_SESSION_COMPLETED:
        return IgnoredEvent(kind=envelope.type, event_id=envelope.id, raw=verified.body)

    try:
        session = CheckoutSessionObject.model_validate(envelope.data.object)
    except ValidationError as exc:
        raise ParseError(f"Invalid checkout session object: {exc.error_count()} error(s)") from exc

    return PaymentEvent(
        kind=envelope.type,
        account_ref=_present(session.client_reference_id),
        email=_present(session.customer_email),
        session_id=session.id,
        event_id=envelope.id,
        raw=verified.body,
    )
