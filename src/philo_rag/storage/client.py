"""Supabase client construction."""

from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client

from philo_rag.config import settings
from philo_rag.errors import StorageError


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return a service-role Supabase client built from settings.

    Raises
    ------
    StorageError
        If the URL or service-role key is not configured.
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise StorageError(
            "Supabase is not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
