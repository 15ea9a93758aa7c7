"""Supabase-backed AccountStore.

Talks to the project's PostgREST endpoint with the service role key, which
bypasses row level security. The key is server-only and must never be
exposed to the browser bundle.

The supabase client is synchronous, so every call runs in a worker thread
via asyncio.to_thread() to keep the event loop free.
"""

import asyncio
from functools import cached_property

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import Client, create_client

from subtrack.accounts.store import LookupField
from subtrack.core.exceptions import ConfigurationError, StorageError

logger = structlog.get_logger(__name__)


class SupabaseAccountStore:
    def __init__(self, url: str, service_role_key: str, table: str = "profiles"):
        self.url = url
        self.service_role_key = service_role_key
        self.table = table

    def ensure_configured(self) -> None:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if missing:
            raise ConfigurationError(f"Missing Supabase credentials: {', '.join(missing)}")

    @cached_property
    def client(self) -> Client:
        self.ensure_configured()
        # Log initialization without exposing the key
        logger.info("supabase_client_initialized", supabase_url=self.url, key_length=len(self.service_role_key))
        return create_client(self.url, self.service_role_key)

    def _update(self, field: LookupField, value: str) -> list[dict]:
        response = (
            self.client.table(self.table)
            .update({"has_lifetime_access": True})
            .eq(str(field), value)
            .execute()
        )
        return response.data or []

    async def grant_lifetime_access(self, field: LookupField, value: str) -> list[str]:
        try:
            rows = await asyncio.to_thread(self._update, field, value)
        except (APIError, httpx.HTTPError) as exc:
            logger.error("account_store_update_failed", backend="supabase", field=str(field), error=str(exc))
            raise StorageError(f"Supabase update failed: {type(exc).__name__}") from exc

        return [str(row["id"]) for row in rows if "id" in row]

    def _probe(self) -> None:
        self.client.table(self.table).select("id").limit(1).execute()

    async def ping(self) -> bool:
        try:
            await asyncio.to_thread(self._probe)
        except (APIError, httpx.HTTPError, ConfigurationError) as exc:
            logger.error("account_store_ping_failed", backend="supabase", error=str(exc))
            return False
        return True
