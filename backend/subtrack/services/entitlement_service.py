"""EntitlementApplier: grants lifetime access for a completed checkout.

Constructor dependency injection (AccountStore) so tests can pass a fake.
"""

from dataclasses import dataclass

import structlog

from subtrack.accounts.store import AccountStore, LookupField
from subtrack.core.exceptions import IdentificationError, NoAccountMatched
from subtrack.domain.payment_events import CHECKOUT_SESSION_COMPLETED, PaymentEvent

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ApplyResult:
    field: LookupField
    value: str
    account_ids: list[str]


def select_lookup(event: PaymentEvent) -> tuple[LookupField, str]:
    """Pick the lookup key for an event.

    The account reference was bound explicitly when the checkout session was
    created, so it wins over the email, which may be shared or differ in
    case. Email is only consulted when no reference is present.
    """
    if event.account_ref:
        return LookupField.ID, event.account_ref
    if event.email:
        return LookupField.EMAIL, event.email
    raise IdentificationError(f"No account reference or email in session {event.session_id}")


class EntitlementApplier:
    def __init__(self, store: AccountStore):
        self.store = store

    async def apply(self, event: PaymentEvent) -> ApplyResult:
        """Set has_lifetime_access=true on the account the event identifies.

        Re-applying the same event is a no-op that succeeds again.

        Raises:
            IdentificationError: not a checkout completion, or no usable reference
            NoAccountMatched: the update touched zero rows
            StorageError: the store faulted (propagated from the store)
        """
        if event.kind != CHECKOUT_SESSION_COMPLETED:
            raise IdentificationError(f"Event kind '{event.kind}' does not grant entitlements")

        field, value = select_lookup(event)
        logger.info("entitlement_lookup", field=str(field), session_id=event.session_id)

        account_ids = await self.store.grant_lifetime_access(field, value)
        if not account_ids:
            raise NoAccountMatched(str(field), value)

        logger.info(
            "entitlement_granted",
            field=str(field),
            account_ids=account_ids,
            session_id=event.session_id,
        )
        return ApplyResult(field=field, value=value, account_ids=account_ids)
