"""Persisted record shapes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StoredChunkRecord(BaseModel):
    """One row of the vector-enabled documents table.

    Chunks are the unit of storage and retrieval; there is no parent
    document row.  ``metadata`` carries the user-supplied document fields
    merged with chunk position and parser provenance.
    """

    content: str
    embedding: list[float]
    title: str | None = None
    author: str | None = None
    doc_type: str = "Book"
    genre: str | None = None
    topic: str | None = None
    difficulty: str | None = None
    tags: list[str] | None = None
    source_type: str = "pdf_upload"
    summary: str | None = None
    chunk_id: int = Field(ge=1, description="1-based position of the chunk in its file")
    total_chunks: int
    source: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_row(self) -> dict[str, Any]:
        """JSON-safe column mapping for the insert call."""
        return self.model_dump(mode="json")
