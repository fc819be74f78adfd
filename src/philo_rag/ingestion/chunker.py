"""Text chunking strategies."""

from __future__ import annotations

import logging

from langchain_text_splitters import (
    CharacterTextSplitter,
    RecursiveCharacterTextSplitter,
    TextSplitter,
)

from philo_rag.errors import ChunkingError
from philo_rag.ingestion.models import Chunk

logger = logging.getLogger(__name__)

MARKDOWN_SEPARATORS = ["\n## ", "\n### ", "\n#### ", "\n\n", "\n", " ", ""]
HTML_SEPARATORS = ["</div>", "</p>", "</h1>", "</h2>", "</h3>", "\n\n", "\n", " ", ""]

SPLITTER_TYPES = ("recursive", "character", "markdown", "html")


def validate_chunk_params(chunk_size: int, chunk_overlap: int) -> None:
    """Reject sizes that would make the splitter loop or misbehave."""
    if chunk_size <= 0:
        raise ChunkingError(f"chunk_size ({chunk_size}) must be positive")
    if chunk_overlap < 0:
        raise ChunkingError(f"chunk_overlap ({chunk_overlap}) must not be negative")
    if chunk_overlap >= chunk_size:
        raise ChunkingError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )


def build_splitter(
    splitter_type: str = "recursive",
    chunk_size: int = 5000,
    chunk_overlap: int = 500,
) -> TextSplitter:
    """Return the LangChain splitter for *splitter_type*.

    Unknown names fall back to ``recursive``.
    """
    validate_chunk_params(chunk_size, chunk_overlap)

    if splitter_type == "character":
        return CharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    if splitter_type == "markdown":
        return RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=MARKDOWN_SEPARATORS,
        )
    if splitter_type == "html":
        return RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=HTML_SEPARATORS,
        )
    if splitter_type != "recursive":
        logger.warning("Unknown splitter type %r; using recursive", splitter_type)
    return RecursiveCharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)


def split_text(
    text: str,
    splitter_type: str = "recursive",
    chunk_size: int = 5000,
    chunk_overlap: int = 500,
) -> list[Chunk]:
    """Split *text* into ordered, overlapping chunks.

    Parameters
    ----------
    text:
        Extracted document text.
    splitter_type:
        Strategy name, see :data:`SPLITTER_TYPES`.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.

    Returns
    -------
    list[Chunk]
        Chunks indexed from 0; empty when *text* is blank.
    """
    splitter = build_splitter(splitter_type, chunk_size, chunk_overlap)
    if not text.strip():
        return []
    pieces = splitter.split_text(text)
    return [Chunk.from_text(i, piece) for i, piece in enumerate(pieces)]
