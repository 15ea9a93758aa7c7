"""Stripe webhook signature verification.

Stripe signs each delivery with ``Stripe-Signature: t=<unix ts>,v1=<hex>``
where the v1 value is HMAC-SHA256(secret, "<ts>.<raw body>"). The body must
be the exact bytes received; re-serialising parsed JSON changes the byte
layout and breaks the match.
"""

import time
from dataclasses import dataclass

import stripe
import structlog

from subtrack.core.exceptions import ConfigurationError, VerificationError

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "stripe-signature"
DEFAULT_TOLERANCE = 300


@dataclass(frozen=True)
class VerifiedRequest:
    """A callback body whose signature has been checked.

    Only SignatureVerifier.verify() builds these.
    """

    body: bytes
    signed_at: int | None


def _signed_timestamp(header: str) -> int | None:
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class SignatureVerifier:
    """Checks callback bodies against the shared Stripe webhook secret."""

    def __init__(self, secret: str, tolerance: int = DEFAULT_TOLERANCE):
        self.secret = secret
        self.tolerance = tolerance

    def ensure_configured(self) -> None:
        if not self.secret:
            raise ConfigurationError("STRIPE_WEBHOOK_SECRET is not configured")

    def verify(self, raw_body: bytes, signature_header: str | None) -> VerifiedRequest:
        """Return a VerifiedRequest or raise.

        Raises:
            ConfigurationError: the shared secret is missing
            VerificationError: header missing, body not UTF-8, signature
                mismatch, or timestamp outside tolerance
        """
        self.ensure_configured()

        if not signature_header:
            raise VerificationError("Missing Stripe-Signature header")

        try:
            payload = raw_body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise VerificationError("Request body is not valid UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(payload, signature_header, self.secret, self.tolerance)
        except stripe.SignatureVerificationError as exc:
            raise VerificationError(str(exc)) from exc

        signed_at = _signed_timestamp(signature_header)
        # verify_header only rejects stamps older than the tolerance
        if self.tolerance is not None and signed_at is not None and signed_at - time.time() > self.tolerance:
            raise VerificationError("Timestamp is too far in the future")

        return VerifiedRequest(body=raw_body, signed_at=signed_at)
