"""Concrete PDF-to-text backends.

Each backend is a plain function ``(data: bytes) -> ParsedText``; timing,
error wrapping and registration live in :mod:`philo_rag.parsing.registry`.
"""

from __future__ import annotations

import io
import re
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

import pdfplumber
from pypdf import PdfReader

from philo_rag.parsing.models import PdfMetadata


class ParsedText(NamedTuple):
    text: str
    metadata: PdfMetadata


_PDF_DATE_RE = re.compile(
    r"^(?:D:)?(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:(Z)|([+-])(\d{2})'?(\d{2})?'?)?"
)


def parse_pdf_date(raw: Any) -> datetime | None:
    """Convert a PDF date string (``D:YYYYMMDDHHmmSS...``) to a UTC datetime.

    Missing trailing components default to their minimum value.  Returns
    ``None`` for empty or malformed input.
    """
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, bytes):
        raw = raw.decode("latin-1", errors="ignore")
    if not isinstance(raw, str):
        return None

    match = _PDF_DATE_RE.match(raw.strip())
    if match is None:
        return None
    groups = match.groups()
    year, month, day, hour, minute, second = (
        int(part) if part else default
        for part, default in zip(groups[:6], (0, 1, 1, 0, 0, 0))
    )
    _, sign, offset_hours, offset_minutes = groups[6:]
    offset = timedelta(0)
    if sign:
        offset = timedelta(hours=int(offset_hours), minutes=int(offset_minutes or 0))
        if sign == "-":
            offset = -offset
    try:
        local = datetime(year, month, day, hour, minute, second, tzinfo=timezone(offset))
    except ValueError:
        return None
    return local.astimezone(timezone.utc)


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ---------------------------------------------------------------------------
# pypdf
# ---------------------------------------------------------------------------


def parse_with_pypdf(data: bytes) -> ParsedText:
    """Fast text extraction for standard PDFs with an embedded text layer."""
    reader = PdfReader(io.BytesIO(data))
    text = "\n".join(page.extract_text() or "" for page in reader.pages)

    info = reader.metadata
    if info is None:
        return ParsedText(text, PdfMetadata(pages=len(reader.pages) or None))

    metadata = PdfMetadata(
        pages=len(reader.pages) or None,
        title=_clean(info.title),
        author=_clean(info.author),
        creator=_clean(info.creator),
        subject=_clean(info.subject),
        keywords=_clean(info.get("/Keywords")),
        creation_date=parse_pdf_date(info.get("/CreationDate")),
        modification_date=parse_pdf_date(info.get("/ModDate")),
    )
    return ParsedText(text, metadata)


# ---------------------------------------------------------------------------
# pdfplumber
# ---------------------------------------------------------------------------


def parse_with_pdfplumber(data: bytes) -> ParsedText:
    """Layout-aware extraction; keeps column alignment and line breaks."""
    text_parts: list[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text_parts.append(page.extract_text(layout=True) or "")
        info = pdf.metadata or {}
        page_count = len(pdf.pages)

    metadata = PdfMetadata(
        pages=page_count or None,
        title=_clean(info.get("Title")),
        author=_clean(info.get("Author")),
        creator=_clean(info.get("Creator")),
        subject=_clean(info.get("Subject")),
        keywords=_clean(info.get("Keywords")),
        creation_date=parse_pdf_date(info.get("CreationDate")),
        modification_date=parse_pdf_date(info.get("ModDate")),
    )
    return ParsedText("\n".join(text_parts), metadata)


# ---------------------------------------------------------------------------
# mock
# ---------------------------------------------------------------------------


def parse_with_mock(data: bytes) -> ParsedText:
    """Deterministic stand-in used in tests and as a development fallback."""
    text = (
        f"Mock PDF content extracted from {len(data)} byte buffer. "
        "This is sample text that would normally come from a PDF parser. "
        "The content includes multiple paragraphs and sections to test chunking functionality."
    )
    metadata = PdfMetadata(
        pages=1,
        title="Mock PDF Document",
        author="Test Author",
        creator="Mock Parser",
    )
    return ParsedText(text, metadata)
