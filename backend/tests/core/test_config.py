"""Tests for environment-driven settings."""

import pytest

from subtrack.core.config import Settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SUPABASE_URL",
        "VITE_SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
        "SB_SECRET_KEY",
        "STRIPE_WEBHOOK_SECRET",
        "STRIPE_WEBHOOK_TOLERANCE",
        "ACCOUNT_STORE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.account_store == "database"
    assert settings.stripe_webhook_secret == ""
    assert settings.stripe_webhook_tolerance == 300
    assert settings.supabase_profiles_table == "profiles"
    assert settings.database_create_schema is False


def test_stripe_values_from_env(monkeypatch):
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_env")
    monkeypatch.setenv("STRIPE_WEBHOOK_TOLERANCE", "120")

    settings = Settings(_env_file=None)

    assert settings.stripe_webhook_secret == "whsec_env"
    assert settings.stripe_webhook_tolerance == 120


def test_vite_supabase_url_is_accepted(monkeypatch):
    monkeypatch.setenv("VITE_SUPABASE_URL", "https://vite.supabase.co")

    assert Settings(_env_file=None).supabase_url == "https://vite.supabase.co"


def test_supabase_url_wins_over_vite_name(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://server.supabase.co")
    monkeypatch.setenv("VITE_SUPABASE_URL", "https://vite.supabase.co")

    assert Settings(_env_file=None).supabase_url == "https://server.supabase.co"


def test_sb_secret_key_is_accepted(monkeypatch):
    monkeypatch.setenv("SB_SECRET_KEY", "sb_secret")

    assert Settings(_env_file=None).supabase_service_role_key == "sb_secret"


def test_unknown_account_store_rejected(monkeypatch):
    monkeypatch.setenv("ACCOUNT_STORE", "redis")

    with pytest.raises(ValueError):
        Settings(_env_file=None)
