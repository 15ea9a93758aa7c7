"""CallbackEndpoint: the request/response shell for Stripe payment callbacks.

Order is fixed: method check, configuration check, header and raw body
extraction, signature verification, interpretation, entitlement grant.
Retries are left to Stripe's redelivery, driven purely by the status code:
anything the same payload can never fix is answered 2xx or 4xx, storage
faults are answered 5xx.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from subtrack.core.exceptions import (
    ConfigurationError,
    IdentificationError,
    MethodNotAllowed,
    NoAccountMatched,
    ParseError,
    StorageError,
    VerificationError,
)
from subtrack.domain.payment_events import IgnoredEvent, interpret
from subtrack.integrations.stripe_signature import SIGNATURE_HEADER, SignatureVerifier
from subtrack.services.entitlement_service import EntitlementApplier

logger = structlog.get_logger(__name__)


class CallbackOutcome(StrEnum):
    METHOD_REJECTED = "method_rejected"
    CONFIGURATION_ERROR = "configuration_error"
    VERIFICATION_FAILED = "verification_failed"
    PARSE_FAILED = "parse_failed"
    IDENTIFICATION_FAILED = "identification_failed"
    STORAGE_FAILED = "storage_failed"
    PROCESSED = "processed"


@dataclass(frozen=True)
class CallbackResponse:
    status_code: int
    body: dict[str, Any]
    outcome: CallbackOutcome
    headers: dict[str, str] = field(default_factory=dict)


RECEIVED = {"received": True}


def _header(headers: Mapping[str, str], name: str) -> str | None:
    # Starlette headers are case-insensitive already; plain dicts are not
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


class CallbackEndpoint:
    def __init__(self, verifier: SignatureVerifier, applier: EntitlementApplier):
        self.verifier = verifier
        self.applier = applier

    def _check_method(self, method: str) -> None:
        if method.upper() != "POST":
            raise MethodNotAllowed(method)

    def _check_configuration(self) -> None:
        self.verifier.ensure_configured()
        self.applier.store.ensure_configured()

    async def handle(self, method: str, headers: Mapping[str, str], body: bytes) -> CallbackResponse:
        try:
            self._check_method(method)
        except MethodNotAllowed:
            logger.info("webhook_method_not_allowed", method=method)
            return CallbackResponse(
                405,
                {"detail": "Method Not Allowed"},
                CallbackOutcome.METHOD_REJECTED,
                headers={"Allow": "POST"},
            )

        try:
            self._check_configuration()
        except ConfigurationError as exc:
            logger.error("webhook_configuration_error", error=str(exc))
            return CallbackResponse(400, {"detail": "Webhook rejected"}, CallbackOutcome.CONFIGURATION_ERROR)

        signature = _header(headers, SIGNATURE_HEADER)

        try:
            verified = self.verifier.verify(body, signature)
        except VerificationError as exc:
            # The reason stays in the logs; the caller only learns it was rejected
            logger.warning("webhook_signature_rejected", reason=str(exc))
            return CallbackResponse(400, {"detail": "Webhook rejected"}, CallbackOutcome.VERIFICATION_FAILED)
        logger.info("webhook_signature_verified", signed_at=verified.signed_at)

        try:
            event = interpret(verified)
        except ParseError as exc:
            logger.warning("webhook_payload_invalid", error=str(exc))
            return CallbackResponse(400, {"detail": "Invalid event payload"}, CallbackOutcome.PARSE_FAILED)

        if isinstance(event, IgnoredEvent):
            logger.info("webhook_event_ignored", event_type=event.kind, event_id=event.event_id)
            return CallbackResponse(200, RECEIVED, CallbackOutcome.PROCESSED)

        logger.info(
            "webhook_checkout_completed",
            event_id=event.event_id,
            session_id=event.session_id,
            has_account_ref=event.account_ref is not None,
            has_email=event.email is not None,
        )

        try:
            await self.applier.apply(event)
        except IdentificationError as exc:
            logger.error("webhook_identification_failed", error=str(exc), session_id=event.session_id)
            return CallbackResponse(
                400, {"detail": "No user identification found"}, CallbackOutcome.IDENTIFICATION_FAILED
            )
        except NoAccountMatched as exc:
            # Redelivering the same payload cannot make the account appear
            logger.warning(
                "webhook_no_account_matched",
                field=exc.field,
                session_id=event.session_id,
            )
        except StorageError as exc:
            logger.error("webhook_storage_failed", error=str(exc), session_id=event.session_id)
            return CallbackResponse(500, {"detail": "Database update failed"}, CallbackOutcome.STORAGE_FAILED)

        return CallbackResponse(200, RECEIVED, CallbackOutcome.PROCESSED)
