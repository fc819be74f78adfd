"""In-process feedback store for local development and tests.

Implements the same filtering and aggregation rules as the SQL function
and views in ``sql/setup_feedback_table.sql``.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date

from philo_rag.feedback.base import FeedbackStoreBase
from philo_rag.feedback.models import (
    DailyFeedbackTrend,
    FeedbackMatch,
    FeedbackRecord,
    FeedbackStats,
    FeedbackType,
)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two equal-length vectors (0.0 for zero vectors)."""
    if len(a) != len(b):
        raise ValueError(f"Vector lengths differ: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0:
        return 0.0
    return dot / norm


def _aggregate(records: list[FeedbackRecord]) -> dict:
    counts = {ft: 0 for ft in FeedbackType}
    for r in records:
        counts[r.feedback_type] += 1
    ratings = [r.rating for r in records if r.rating is not None]
    return {
        "total_feedback": len(records),
        "helpful_count": counts[FeedbackType.HELPFUL],
        "not_helpful_count": counts[FeedbackType.NOT_HELPFUL],
        "partial_count": counts[FeedbackType.PARTIAL],
        "detailed_count": counts[FeedbackType.DETAILED],
        "avg_rating": sum(ratings) / len(ratings) if ratings else None,
    }


class InMemoryFeedbackStore(FeedbackStoreBase):
    """Keeps feedback rows in a list."""

    def __init__(self, table_name: str = "feedback") -> None:
        super().__init__(table_name)
        self.records: list[FeedbackRecord] = []

    def insert(self, record: FeedbackRecord) -> FeedbackRecord:
        self.records.append(record)
        return record

    def match_by_embedding(
        self,
        query_embedding: list[float],
        *,
        match_threshold: float = 0.8,
        match_count: int = 5,
    ) -> list[FeedbackMatch]:
        matches: list[FeedbackMatch] = []
        for r in self.records:
            if r.query_embedding is None or not (r.comment or "").strip():
                continue
            similarity = cosine_similarity(r.query_embedding, query_embedding)
            if similarity <= match_threshold:
                continue
            matches.append(
                FeedbackMatch(
                    **r.model_dump(exclude={"query_embedding"}),
                    similarity=similarity,
                )
            )
        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:match_count]

    def stats(self) -> FeedbackStats:
        created = [r.created_at for r in self.records]
        return FeedbackStats(
            **_aggregate(self.records),
            rated_responses=sum(1 for r in self.records if r.rating is not None),
            first_feedback=min(created, default=None),
            latest_feedback=max(created, default=None),
        )

    def daily_trends(self) -> list[DailyFeedbackTrend]:
        by_day: dict[date, list[FeedbackRecord]] = defaultdict(list)
        for r in self.records:
            by_day[r.created_at.date()].append(r)
        return [
            DailyFeedbackTrend(feedback_date=day, **_aggregate(rows))
            for day, rows in sorted(by_day.items(), reverse=True)
        ]
