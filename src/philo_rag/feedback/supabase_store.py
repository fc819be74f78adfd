"""Supabase implementation of the feedback store.

Similarity search goes through the ``match_feedback_by_embedding`` RPC
and aggregates are read from the ``feedback_stats`` and
``daily_feedback_trends`` views, all defined in
``sql/setup_feedback_table.sql``.
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from philo_rag.config import settings
from philo_rag.errors import StorageError
from philo_rag.feedback.base import FeedbackStoreBase
from philo_rag.feedback.models import (
    DailyFeedbackTrend,
    FeedbackMatch,
    FeedbackRecord,
    FeedbackStats,
)

logger = logging.getLogger(__name__)

MATCH_FUNCTION = "match_feedback_by_embedding"
STATS_VIEW = "feedback_stats"
TRENDS_VIEW = "daily_feedback_trends"


class SupabaseFeedbackStore(FeedbackStoreBase):
    """Feedback table, RPC and views hosted on Supabase.

    Parameters
    ----------
    table_name:
        Feedback table name.
    client:
        Pre-built Supabase client; the shared service-role client is used
        when *None*.
    """

    def __init__(
        self,
        table_name: str = settings.feedback_table,
        *,
        client: Client | None = None,
    ) -> None:
        super().__init__(table_name)
        if client is None:
            from philo_rag.storage.client import get_supabase_client

            client = get_supabase_client()
        self._client = client

    def _execute(self, what: str, query: Any) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as exc:
            raise StorageError(f"{what} failed: {exc}") from exc
        return response.data or []

    def insert(self, record: FeedbackRecord) -> FeedbackRecord:
        row = record.model_dump(mode="json", exclude_none=True)
        self._execute(
            f"Insert into {self.table_name}",
            self._client.table(self.table_name).insert(row),
        )
        logger.info("Stored %s feedback %s", record.feedback_type.value, record.id)
        return record

    def match_by_embedding(
        self,
        query_embedding: list[float],
        *,
        match_threshold: float = 0.8,
        match_count: int = 5,
    ) -> list[FeedbackMatch]:
        rows = self._execute(
            MATCH_FUNCTION,
            self._client.rpc(
                MATCH_FUNCTION,
                {
                    "query_embedding": query_embedding,
                    "match_threshold": match_threshold,
                    "match_count": match_count,
                },
            ),
        )
        return [FeedbackMatch.model_validate(row) for row in rows]

    def stats(self) -> FeedbackStats:
        rows = self._execute(STATS_VIEW, self._client.table(STATS_VIEW).select("*"))
        return FeedbackStats.model_validate(rows[0]) if rows else FeedbackStats()

    def daily_trends(self) -> list[DailyFeedbackTrend]:
        rows = self._execute(TRENDS_VIEW, self._client.table(TRENDS_VIEW).select("*"))
        return [DailyFeedbackTrend.model_validate(row) for row in rows]
