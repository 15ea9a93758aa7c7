"""AccountStore protocol: the storage seam behind the entitlement grant.

Every backend expresses the grant as one conditional statement
(``SET has_lifetime_access = true WHERE <field> = <value>``) returning the
ids of the rows it touched, so concurrent and redundant deliveries converge
on the same state without any in-process locking.
"""

from enum import StrEnum
from typing import Protocol, runtime_checkable


class LookupField(StrEnum):
    """Column used to locate the paying account."""

    ID = "id"
    EMAIL = "email"


@runtime_checkable
class AccountStore(Protocol):
    """Storage operations the payment callback needs."""

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if credentials for this store are missing."""
        ...

    async def grant_lifetime_access(self, field: LookupField, value: str) -> list[str]:
        """Set has_lifetime_access=true on every account where field == value.

        Returns the ids of matched accounts (empty when nothing matched).
        Raises StorageError on any backend fault.
        """
        ...

    async def ping(self) -> bool:
        """Return True when the backing store is reachable."""
        ...
