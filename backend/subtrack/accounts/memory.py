"""In-process AccountStore for local development and tests."""

from dataclasses import dataclass, field as dataclass_field

from subtrack.accounts.store import LookupField


@dataclass
class AccountRecord:
    id: str
    email: str | None = None
    has_lifetime_access: bool = False


@dataclass
class InMemoryAccountStore:
    """Dict-backed store recording every grant statement it executes."""

    accounts: dict[str, AccountRecord] = dataclass_field(default_factory=dict)
    updates: list[tuple[LookupField, str]] = dataclass_field(default_factory=list)

    def add(self, account_id: str, email: str | None = None, has_lifetime_access: bool = False) -> AccountRecord:
        record = AccountRecord(id=account_id, email=email, has_lifetime_access=has_lifetime_access)
        self.accounts[account_id] = record
        return record

    def ensure_configured(self) -> None:
        return None

    async def grant_lifetime_access(self, field: LookupField, value: str) -> list[str]:
        self.updates.append((field, value))
        matched = [
            record
            for record in self.accounts.values()
            if getattr(record, str(field)) == value
        ]
        for record in matched:
            record.has_lifetime_access = True
        return [record.id for record in matched]

    async def ping(self) -> bool:
        return True
