"""
Feedback: user ratings of chat answers with embedding-based lookup.

Public surface
--------------
- :class:`FeedbackStoreBase`: abstract backend.
- :class:`SupabaseFeedbackStore`: table + RPC + views on Supabase.
- :class:`InMemoryFeedbackStore`: development / test backend.
- :func:`get_feedback_store`: backend selected by ``settings.storage_backend``.
"""

from functools import lru_cache

from philo_rag.feedback.base import FeedbackStoreBase
from philo_rag.feedback.memory_store import InMemoryFeedbackStore
from philo_rag.feedback.models import (
    DailyFeedbackTrend,
    FeedbackCreate,
    FeedbackMatch,
    FeedbackRecord,
    FeedbackStats,
    FeedbackType,
)

__all__ = [
    "DailyFeedbackTrend",
    "FeedbackCreate",
    "FeedbackMatch",
    "FeedbackRecord",
    "FeedbackStats",
    "FeedbackStoreBase",
    "FeedbackType",
    "InMemoryFeedbackStore",
    "SupabaseFeedbackStore",
    "get_feedback_store",
]


def get_feedback_store() -> FeedbackStoreBase:
    """Return the feedback store configured in settings."""
    from philo_rag.config import settings

    if settings.storage_backend == "memory":
        return _shared_memory_store(settings.feedback_table)

    from philo_rag.feedback.supabase_store import SupabaseFeedbackStore

    return SupabaseFeedbackStore(settings.feedback_table)


@lru_cache(maxsize=None)
def _shared_memory_store(table_name: str) -> InMemoryFeedbackStore:
    return InMemoryFeedbackStore(table_name)


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import SupabaseFeedbackStore to avoid pulling in supabase at import time."""
    if name == "SupabaseFeedbackStore":
        from philo_rag.feedback.supabase_store import SupabaseFeedbackStore

        return SupabaseFeedbackStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
