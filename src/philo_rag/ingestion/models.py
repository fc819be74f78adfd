"""Data models flowing through the chunking, preview and ingestion stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from philo_rag.parsing.models import PdfMetadata


@dataclass(frozen=True)
class UploadedFile:
    """A file received from the client, fully read into memory."""

    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class ChunkingOptions(BaseModel):
    """Per-request knobs for parsing and splitting.

    Attributes
    ----------
    splitter_type:
        One of ``recursive``, ``character``, ``markdown``, ``html``.
    chunk_size:
        Target maximum characters per chunk.
    chunk_overlap:
        Trailing characters of a chunk repeated at the start of the next one.
    pdf_parser:
        Parser backend name.
    fallback_to_mock:
        Retry failed parses with the ``mock`` backend (development only).
    """

    splitter_type: str = "recursive"
    chunk_size: int = 5000
    chunk_overlap: int = 500
    pdf_parser: str = "pdf-parse"
    fallback_to_mock: bool = False


class Chunk(BaseModel):
    """A contiguous piece of a document's extracted text."""

    index: int
    content: str
    length: int

    @classmethod
    def from_text(cls, index: int, content: str) -> Chunk:
        return cls(index=index, content=content, length=len(content))


class FileParseInfo(PdfMetadata):
    """Parse provenance for one file, reported alongside chunk statistics.

    Serialized with camelCase keys (``parserUsed``, ``creationDate``) for the
    web client.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filename: str
    parser_used: str
    parse_time: int


class ParsingInfo(BaseModel):
    total_parse_time: int = 0
    parser_used: str
    files_metadata: list[FileParseInfo] = Field(default_factory=list)


class ChunkStats(BaseModel):
    """Aggregate, read-only description of a chunking run.

    ``min_length <= avg_length <= max_length`` and
    ``total_chunks == len(all_chunks)`` always hold.
    """

    total_chunks: int
    avg_length: int
    min_length: int
    max_length: int
    first_chunk: Chunk
    last_chunk: Chunk
    all_chunks: list[Chunk]
    parsing_info: ParsingInfo | None = None


class DocumentMetadata(BaseModel):
    """User-supplied description of the uploaded document(s).

    Unknown keys are kept and stored in the record's ``metadata`` column.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    author: str | None = None
    doc_type: str | None = None
    genre: str | None = None
    topic: str | None = None
    difficulty: str | None = None
    tags: list[str] | None = None
    description: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _stringify_difficulty(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class IngestionReport(BaseModel):
    """Outcome of an upload: what was attempted and what was stored."""

    documents_count: int = 0
    chunks_count: int = 0
    failed_chunks: int = 0
    failed_files: list[str] = Field(default_factory=list)

    @property
    def status(self) -> Literal["complete", "partial"]:
        return "partial" if self.failed_chunks or self.failed_files else "complete"

    @property
    def message(self) -> str:
        return (
            f"Successfully processed {self.documents_count} documents "
            f"with {self.chunks_count} chunks"
        )
