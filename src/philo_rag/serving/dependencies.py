"""FastAPI dependencies for external collaborators.

Routes never build clients themselves, so tests can swap every
collaborator through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from langchain_core.embeddings import Embeddings

from philo_rag.config import settings
from philo_rag.feedback import FeedbackStoreBase, get_feedback_store
from philo_rag.ingestion.embedder import get_embedding_function
from philo_rag.storage import ChunkStoreBase, get_chunk_store

logger = logging.getLogger(__name__)


def get_embedder() -> Embeddings:
    return get_embedding_function()


def get_optional_embedder() -> Embeddings | None:
    """Embedder for best-effort features; ``None`` when unconfigured."""
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY not set; feedback will be stored without embeddings")
        return None
    return get_embedding_function()


def get_store() -> ChunkStoreBase:
    return get_chunk_store()


def get_feedback() -> FeedbackStoreBase:
    return get_feedback_store()
