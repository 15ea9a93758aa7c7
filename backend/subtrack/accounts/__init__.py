"""Account store backends and the factory that picks one from settings."""

import structlog

from subtrack.accounts.store import AccountStore, LookupField
from subtrack.core.config import Settings

logger = structlog.get_logger(__name__)

# Stores that hold a client or state worth reusing across requests
_shared_stores: dict[str, AccountStore] = {}


def build_account_store(settings: Settings) -> AccountStore:
    """Return the AccountStore selected by settings.account_store."""
    backend = settings.account_store

    if backend == "supabase":
        if backend not in _shared_stores:
            from subtrack.accounts.supabase_store import SupabaseAccountStore

            _shared_stores[backend] = SupabaseAccountStore(
                url=settings.supabase_url,
                service_role_key=settings.supabase_service_role_key,
                table=settings.supabase_profiles_table,
            )
        return _shared_stores[backend]

    if backend == "memory":
        if backend not in _shared_stores:
            from subtrack.accounts.memory import InMemoryAccountStore

            _shared_stores[backend] = InMemoryAccountStore()
        return _shared_stores[backend]

    from subtrack.accounts.database import DatabaseAccountStore
    from subtrack.db.base import get_session_factory

    try:
        session_factory = get_session_factory()
    except RuntimeError:
        logger.warning("account_store_database_not_initialized")
        session_factory = None
    return DatabaseAccountStore(session_factory)


def reset_account_stores() -> None:
    """Drop cached store instances (tests and settings reloads)."""
    _shared_stores.clear()


__all__ = ["AccountStore", "LookupField", "build_account_store", "reset_account_stores"]
