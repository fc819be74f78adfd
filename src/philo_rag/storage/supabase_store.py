"""Supabase (Postgres + pgvector) implementation of the chunk store."""

from __future__ import annotations

import logging

from supabase import Client

from philo_rag.config import settings
from philo_rag.errors import StorageError
from philo_rag.storage.base import ChunkStoreBase
from philo_rag.storage.models import StoredChunkRecord

logger = logging.getLogger(__name__)


class SupabaseChunkStore(ChunkStoreBase):
    """Writes chunk rows into a Supabase table.

    Parameters
    ----------
    table_name:
        Target table, ``documents_enhanced`` by default.
    client:
        Pre-built Supabase client.  When *None* the shared service-role
        client from :func:`~philo_rag.storage.client.get_supabase_client`
        is used.
    """

    def __init__(
        self,
        table_name: str = settings.documents_table,
        *,
        client: Client | None = None,
    ) -> None:
        super().__init__(table_name)
        if client is None:
            from philo_rag.storage.client import get_supabase_client

            client = get_supabase_client()
        self._client = client

    def insert(self, record: StoredChunkRecord) -> None:
        try:
            self._client.table(self.table_name).insert(record.to_row()).execute()
        except Exception as exc:
            raise StorageError(
                f"Insert into {self.table_name} failed for {record.source} "
                f"chunk {record.chunk_id}: {exc}"
            ) from exc

    def health_check(self) -> bool:
        try:
            self._client.table(self.table_name).select("chunk_id").limit(1).execute()
            return True
        except Exception:
            logger.warning("Supabase health-check failed", exc_info=True)
            return False
