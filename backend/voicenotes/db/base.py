from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from voicenotes.config import settings
from voicenotes.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Return a cached Supabase client using the service role key.

    Used by the reminder dispatcher and background jobs, which act on rows of
    every user and therefore bypass RLS.
    """
    logger.debug("Initializing Supabase admin client")
    if not settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for admin client")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    If a JWT is provided it becomes the PostgREST bearer, so RLS policies
    apply to every table operation in this request.
    """
    logger.debug("Creating request-scoped Supabase client")
    anon_key = settings.supabase_anon_key
    if not anon_key:
        raise RuntimeError("supabase_anon_key is required for request client")

    client = create_client(
        settings.supabase_url,
        anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
