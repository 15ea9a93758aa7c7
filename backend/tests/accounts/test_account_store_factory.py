"""Tests for build_account_store backend selection."""

from unittest.mock import MagicMock, patch

import pytest

from subtrack.accounts import build_account_store, reset_account_stores
from subtrack.accounts.database import DatabaseAccountStore
from subtrack.accounts.memory import InMemoryAccountStore
from subtrack.accounts.supabase_store import SupabaseAccountStore
from subtrack.core.config import Settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _fresh_stores():
    reset_account_stores()
    yield
    reset_account_stores()


def test_memory_backend_is_shared():
    settings = Settings(_env_file=None, account_store="memory")

    first = build_account_store(settings)
    second = build_account_store(settings)

    assert isinstance(first, InMemoryAccountStore)
    assert first is second


def test_supabase_backend_uses_settings(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    settings = Settings(_env_file=None, account_store="supabase", supabase_profiles_table="accounts")

    store = build_account_store(settings)

    assert isinstance(store, SupabaseAccountStore)
    assert store.url == "https://example.supabase.co"
    assert store.service_role_key == "service-role-key"
    assert store.table == "accounts"
    store.ensure_configured()


def test_database_backend_uses_session_factory():
    settings = Settings(_env_file=None, account_store="database")
    factory = MagicMock()

    with patch("subtrack.db.base.get_session_factory", return_value=factory):
        store = build_account_store(settings)

    assert isinstance(store, DatabaseAccountStore)
    assert store.session_factory is factory


def test_database_backend_before_init_db():
    settings = Settings(_env_file=None, account_store="database")

    with patch("subtrack.db.base.get_session_factory", side_effect=RuntimeError("Database not initialized")):
        store = build_account_store(settings)

    assert isinstance(store, DatabaseAccountStore)
    assert store.session_factory is None


async def test_memory_store_records_updates():
    store = InMemoryAccountStore()
    store.add("acct_1", email="one@example.com")

    assert await store.grant_lifetime_access("email", "one@example.com") == ["acct_1"]
    assert store.accounts["acct_1"].has_lifetime_access is True
    assert await store.ping() is True
