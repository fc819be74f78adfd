"""Chunk statistics for the dry-run preview path."""

from __future__ import annotations

import math
from collections.abc import Sequence

from philo_rag.ingestion.models import Chunk, ChunkStats, ParsingInfo


def compute_chunk_stats(
    chunks: Sequence[Chunk],
    parsing_info: ParsingInfo | None = None,
) -> ChunkStats:
    """Summarise *chunks* without side effects.

    The mean length is rounded half up.

    Raises
    ------
    ValueError
        If *chunks* is empty.
    """
    if not chunks:
        raise ValueError("Cannot compute statistics over zero chunks")

    lengths = [chunk.length for chunk in chunks]
    return ChunkStats(
        total_chunks=len(chunks),
        avg_length=math.floor(sum(lengths) / len(lengths) + 0.5),
        min_length=min(lengths),
        max_length=max(lengths),
        first_chunk=chunks[0],
        last_chunk=chunks[-1],
        all_chunks=list(chunks),
        parsing_info=parsing_info,
    )
