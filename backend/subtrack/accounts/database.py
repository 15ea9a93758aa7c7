"""SQLAlchemy-backed AccountStore (Postgres via asyncpg)."""

import structlog
from sqlalchemy import text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from subtrack.accounts.store import LookupField
from subtrack.core.exceptions import ConfigurationError, StorageError
from subtrack.db.models.profile import Profile

logger = structlog.get_logger(__name__)

_LOOKUP_COLUMNS = {
    LookupField.ID: Profile.id,
    LookupField.EMAIL: Profile.email,
}


def build_grant_statement(field: LookupField, value: str):
    """UPDATE profiles SET has_lifetime_access = true WHERE <field> = :value RETURNING id."""
    column = _LOOKUP_COLUMNS[field]
    return (
        update(Profile)
        .where(column == value)
        .values(has_lifetime_access=True)
        .returning(Profile.id)
        .execution_options(synchronize_session=False)
    )


class DatabaseAccountStore:
    """Grants lifetime access with a single UPDATE ... RETURNING statement."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None):
        # None until init_db() has run
        self.session_factory = session_factory

    def ensure_configured(self) -> None:
        if self.session_factory is None:
            raise ConfigurationError("Database is not initialized")

    async def grant_lifetime_access(self, field: LookupField, value: str) -> list[str]:
        if self.session_factory is None:
            raise StorageError("Database is not initialized")
        stmt = build_grant_statement(field, value)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                account_ids = [str(row) for row in result.scalars().all()]
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("account_store_update_failed", backend="database", field=str(field), error=str(exc))
            raise StorageError(f"Database update failed: {type(exc).__name__}") from exc

        return account_ids

    async def ping(self) -> bool:
        if self.session_factory is None:
            logger.warning("account_store_ping_failed", backend="database", error="not initialized")
            return False
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("account_store_ping_failed", backend="database", error=str(exc))
            return False
        return True
