"""Abstract base class for chunk-store backends.

A backend only has to persist :class:`StoredChunkRecord` rows one at a
time; the ingestion stage never batches or reads back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from philo_rag.storage.models import StoredChunkRecord


class ChunkStoreBase(ABC):
    """Backend-agnostic chunk persistence interface.

    Parameters
    ----------
    table_name:
        Logical name of the table / collection receiving the rows.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name

    @abstractmethod
    def insert(self, record: StoredChunkRecord) -> None:
        """Persist *record*.

        Implementations raise :class:`~philo_rag.errors.StorageError`
        when the write is rejected.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
