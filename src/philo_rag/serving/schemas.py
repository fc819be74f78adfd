"""Request / response bodies of the HTTP API.

Wire names are camelCase to match the existing web client; Python
attributes stay snake_case.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from philo_rag.ingestion.models import ChunkStats


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreviewResponse(_CamelModel):
    success: bool = True
    chunk_stats: ChunkStats


class UploadResponse(_CamelModel):
    success: bool = True
    documents_count: int
    chunks_count: int
    failed_chunks: int = 0
    failed_files: list[str] = Field(default_factory=list)
    status: Literal["complete", "partial"] = "complete"
    message: str


class ParserInfo(BaseModel):
    name: str
    description: str
    features: dict[str, Any]


class ParserListResponse(BaseModel):
    parsers: list[ParserInfo]
    default: str


class FeedbackCreatedResponse(_CamelModel):
    success: bool = True
    id: str
    has_embedding: bool


class SimilarFeedbackRequest(_CamelModel):
    query: str = Field(min_length=1)
    match_threshold: float = Field(default=0.8, ge=-1.0, le=1.0)
    match_count: int = Field(default=5, ge=1, le=100)
