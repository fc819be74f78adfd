"""
Storage: persistence of embedded chunks.

Public surface
--------------
- :class:`ChunkStoreBase`: abstract backend.
- :class:`SupabaseChunkStore`: default Supabase backend.
- :class:`InMemoryChunkStore`: development / test backend.
- :class:`StoredChunkRecord`: the persisted row.
- :func:`get_chunk_store`: backend selected by ``settings.storage_backend``.
"""

from functools import lru_cache

from philo_rag.storage.base import ChunkStoreBase
from philo_rag.storage.memory_store import InMemoryChunkStore
from philo_rag.storage.models import StoredChunkRecord

__all__ = [
    "ChunkStoreBase",
    "InMemoryChunkStore",
    "StoredChunkRecord",
    "SupabaseChunkStore",
    "get_chunk_store",
]


def get_chunk_store() -> ChunkStoreBase:
    """Return the chunk store configured in settings."""
    from philo_rag.config import settings

    if settings.storage_backend == "memory":
        return _shared_memory_store(settings.documents_table)

    from philo_rag.storage.supabase_store import SupabaseChunkStore

    return SupabaseChunkStore(settings.documents_table)


@lru_cache(maxsize=None)
def _shared_memory_store(table_name: str) -> InMemoryChunkStore:
    return InMemoryChunkStore(table_name)


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import SupabaseChunkStore to avoid pulling in supabase at import time."""
    if name == "SupabaseChunkStore":
        from philo_rag.storage.supabase_store import SupabaseChunkStore

        return SupabaseChunkStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
