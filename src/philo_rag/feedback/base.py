"""Abstract base class for feedback-store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from philo_rag.feedback.models import (
    DailyFeedbackTrend,
    FeedbackMatch,
    FeedbackRecord,
    FeedbackStats,
)


class FeedbackStoreBase(ABC):
    """Backend-agnostic feedback persistence and search.

    Parameters
    ----------
    table_name:
        Name of the feedback table.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name

    @abstractmethod
    def insert(self, record: FeedbackRecord) -> FeedbackRecord:
        """Persist *record* and return it as stored."""
        ...

    @abstractmethod
    def match_by_embedding(
        self,
        query_embedding: list[float],
        *,
        match_threshold: float = 0.8,
        match_count: int = 5,
    ) -> list[FeedbackMatch]:
        """Return commented feedback whose query is similar to *query_embedding*.

        Only rows with cosine similarity strictly greater than
        *match_threshold* and a non-blank comment qualify; results are
        ordered by decreasing similarity and capped at *match_count*.
        """
        ...

    @abstractmethod
    def stats(self) -> FeedbackStats:
        """Overall counts and average rating."""
        ...

    @abstractmethod
    def daily_trends(self) -> list[DailyFeedbackTrend]:
        """Per-day counts and average rating, most recent day first."""
        ...
