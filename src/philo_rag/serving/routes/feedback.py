"""Feedback submission, similarity lookup and aggregate routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from langchain_core.embeddings import Embeddings

from philo_rag.config import settings
from philo_rag.errors import EmbeddingError
from philo_rag.feedback import (
    DailyFeedbackTrend,
    FeedbackCreate,
    FeedbackMatch,
    FeedbackRecord,
    FeedbackStats,
    FeedbackStoreBase,
)
from philo_rag.ingestion.embedder import embed_text
from philo_rag.serving.dependencies import get_embedder, get_feedback, get_optional_embedder
from philo_rag.serving.schemas import FeedbackCreatedResponse, SimilarFeedbackRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackCreatedResponse)
def submit_feedback(
    feedback: FeedbackCreate,
    embedder: Embeddings | None = Depends(get_optional_embedder),
    store: FeedbackStoreBase = Depends(get_feedback),
) -> FeedbackCreatedResponse:
    """Store feedback, embedding the user query when possible.

    A failed embedding call does not lose the feedback; the row is stored
    without a vector and simply never shows up in similarity search.
    """
    query_embedding: list[float] | None = None
    if embedder is not None:
        try:
            query_embedding = embed_text(
                embedder, feedback.user_query, dimensions=settings.embedding_dimensions
            )
        except EmbeddingError as exc:
            logger.warning("Storing feedback without query embedding: %s", exc)

    record = store.insert(
        FeedbackRecord(**feedback.model_dump(), query_embedding=query_embedding)
    )
    return FeedbackCreatedResponse(id=str(record.id), has_embedding=query_embedding is not None)


@router.post("/similar", response_model=list[FeedbackMatch])
def similar_feedback(
    request: SimilarFeedbackRequest,
    embedder: Embeddings = Depends(get_embedder),
    store: FeedbackStoreBase = Depends(get_feedback),
) -> list[FeedbackMatch]:
    """Commented feedback left on queries similar to ``query``."""
    vector = embed_text(embedder, request.query, dimensions=settings.embedding_dimensions)
    matches = store.match_by_embedding(
        vector,
        match_threshold=request.match_threshold,
        match_count=request.match_count,
    )
    logger.info("Found %d similar feedback rows for %r", len(matches), request.query)
    return matches


@router.get("/stats", response_model=FeedbackStats)
def feedback_stats(store: FeedbackStoreBase = Depends(get_feedback)) -> FeedbackStats:
    return store.stats()


@router.get("/trends", response_model=list[DailyFeedbackTrend])
def feedback_trends(
    store: FeedbackStoreBase = Depends(get_feedback),
) -> list[DailyFeedbackTrend]:
    return store.daily_trends()
