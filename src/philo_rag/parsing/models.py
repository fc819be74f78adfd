"""Domain models produced by the parser backends."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ParserFeatures(BaseModel):
    """Capability flags advertised by a parser backend.

    Used by :func:`~philo_rag.parsing.registry.select_parser` to pick the
    first backend that satisfies a set of requirements.
    """

    model_config = ConfigDict(frozen=True)

    extract_text: bool = True
    extract_metadata: bool = False
    handle_encrypted: bool = False
    handle_images: bool = False
    preserve_formatting: bool = False
    ocr_capability: bool = False


class PdfMetadata(BaseModel):
    """Document-information fields recovered from a PDF (all optional)."""

    model_config = ConfigDict(frozen=True)

    pages: int | None = None
    title: str | None = None
    author: str | None = None
    creator: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None


class ParseResult(BaseModel):
    """Uniform output of every parser backend.

    Attributes
    ----------
    text:
        Extracted plain text (may be empty for image-only PDFs).
    metadata:
        Document-information fields.
    parse_time:
        Wall-clock parse duration in milliseconds.
    parser_used:
        Registry name of the backend that produced this result.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    metadata: PdfMetadata = PdfMetadata()
    parse_time: int = 0
    parser_used: str
