"""Async engine and session factory for the profiles database.

In production the ``profiles`` table is owned by the Supabase migrations, so
tables are only created here when DATABASE_CREATE_SCHEMA is set (a local
Postgres, a throwaway test database).
"""

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from subtrack.core.config import get_settings

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the subtrack ORM models."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(url: str | None = None, *, create_schema: bool | None = None) -> async_sessionmaker[AsyncSession]:
    """Open the engine used by DatabaseAccountStore and return its session factory.

    Args:
        url: overrides settings.database_url
        create_schema: overrides settings.database_create_schema; when true,
            missing tables are created with Base.metadata.create_all
    """
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    settings = get_settings()
    if create_schema is None:
        create_schema = settings.database_create_schema

    engine = create_async_engine(
        url or settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )

    if create_schema:
        import subtrack.db.models  # noqa: F401  (registers Profile on Base.metadata)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("db_schema_created", tables=sorted(Base.metadata.tables))

    _engine = engine
    _session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info("db_engine_ready", dialect=engine.dialect.name, create_schema=create_schema)
    return _session_factory


async def close_db() -> None:
    """Dispose of the engine; safe to call when init_db() never ran."""
    global _engine, _session_factory

    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("db_engine_disposed")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory opened by init_db().

    Raises RuntimeError before init_db() has run; build_account_store treats
    that as an unavailable database.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory
