"""Embedding generation through the OpenAI embeddings API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_openai import OpenAIEmbeddings

from philo_rag.config import settings
from philo_rag.errors import EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from philo_rag.ingestion.models import DocumentMetadata


def get_embedding_function() -> OpenAIEmbeddings:
    """Return the configured OpenAI embedding client.

    Raises
    ------
    EmbeddingError
        If no OpenAI API key is configured.
    """
    if not settings.openai_api_key:
        raise EmbeddingError("Embeddings are not configured: set OPENAI_API_KEY")
    return OpenAIEmbeddings(
        model=settings.embedding_model,
        api_key=settings.openai_api_key,
    )


def build_context_text(chunk: str, metadata: DocumentMetadata, filename: str) -> str:
    """Prefix *chunk* with document-level fields before embedding.

    Matching on source, author and topic as well as the body biases
    similarity search toward source-aware results.
    """
    lines = [
        f"Company/Source: {metadata.title or filename}",
        f"Author/Speaker: {metadata.author or 'Unknown'}",
        f"Topic: {metadata.topic or 'General'}",
        f"Content: {chunk}",
    ]
    return "\n".join(lines).strip()


def embed_text(
    embedder: Embeddings,
    text: str,
    *,
    dimensions: int | None = None,
) -> list[float]:
    """Embed *text*, raising :class:`EmbeddingError` on any failure.

    When *dimensions* is given, vectors of a different width are rejected
    since the database column has a fixed size.
    """
    try:
        vector = embedder.embed_query(text)
    except Exception as exc:
        raise EmbeddingError(f"Embedding request failed: {exc}") from exc

    if dimensions is not None and len(vector) != dimensions:
        raise EmbeddingError(
            f"Embedding has {len(vector)} dimensions, expected {dimensions}"
        )
    return list(vector)
