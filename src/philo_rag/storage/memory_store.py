"""In-process chunk store for local development and tests."""

from __future__ import annotations

from philo_rag.storage.base import ChunkStoreBase
from philo_rag.storage.models import StoredChunkRecord


class InMemoryChunkStore(ChunkStoreBase):
    """Keeps inserted records in a list; nothing survives the process."""

    def __init__(self, table_name: str = "documents_enhanced") -> None:
        super().__init__(table_name)
        self.records: list[StoredChunkRecord] = []

    def insert(self, record: StoredChunkRecord) -> None:
        self.records.append(record)

    def health_check(self) -> bool:
        return True
