"""Domain models for user feedback on chat answers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    HELPFUL = "helpful"
    NOT_HELPFUL = "not_helpful"
    PARTIAL = "partial"
    DETAILED = "detailed"


class FeedbackCreate(BaseModel):
    """Feedback submitted by a user about one AI response."""

    user_query: str = Field(min_length=1)
    ai_response: str = Field(min_length=1)
    feedback_type: FeedbackType
    chat_id: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = None


class FeedbackRecord(FeedbackCreate):
    """A stored feedback row.

    Attributes
    ----------
    id:
        Generated identifier.
    query_embedding:
        Embedding of ``user_query`` used for similarity search; ``None``
        when no embedder was available at submission time.
    created_at:
        UTC insertion timestamp.
    """

    id: UUID = Field(default_factory=uuid4)
    query_embedding: list[float] | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FeedbackMatch(FeedbackCreate):
    """A feedback row returned by similarity search, with its cosine similarity."""

    id: UUID
    created_at: datetime
    similarity: float


class FeedbackStats(BaseModel):
    """Overall aggregates (mirrors the ``feedback_stats`` view)."""

    total_feedback: int = 0
    helpful_count: int = 0
    not_helpful_count: int = 0
    partial_count: int = 0
    detailed_count: int = 0
    avg_rating: float | None = None
    rated_responses: int = 0
    first_feedback: datetime | None = None
    latest_feedback: datetime | None = None


class DailyFeedbackTrend(BaseModel):
    """Per-day aggregates (mirrors the ``daily_feedback_trends`` view)."""

    feedback_date: date
    total_feedback: int = 0
    helpful_count: int = 0
    not_helpful_count: int = 0
    partial_count: int = 0
    detailed_count: int = 0
    avg_rating: float | None = None
