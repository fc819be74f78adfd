"""Parser registry: capability-tagged table of PDF-to-text backends.

Backends are plain records rather than subclasses: adding one means
writing a ``(bytes) -> ParsedText`` function in
:mod:`philo_rag.parsing.backends` and appending a :class:`ParserBackend`
entry to :data:`PARSER_REGISTRY`.  Registration order matters, because
:func:`select_parser` returns the *first* backend meeting the requested
capabilities.

Usage::

    from philo_rag.parsing import parse_pdf

    result = parse_pdf(pdf_bytes, "pdf-parse", fallback_to_mock=True)
    print(result.parser_used, result.parse_time, len(result.text))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from philo_rag.errors import ParseError, ParserNotFoundError
from philo_rag.parsing.backends import (
    ParsedText,
    parse_with_mock,
    parse_with_pdfplumber,
    parse_with_pypdf,
)
from philo_rag.parsing.models import ParseResult, ParserFeatures

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "pdf-parse"
MOCK_PARSER = "mock"


@dataclass(frozen=True)
class ParserBackend:
    """One entry of the parser table.

    Attributes
    ----------
    name:
        Registry key, also reported as ``parser_used`` in results.
    description:
        Human-readable summary shown by the parser listing endpoint.
    features:
        Capability flags used for requirement matching.
    extract:
        Function turning raw PDF bytes into text plus metadata.
    """

    name: str
    description: str
    features: ParserFeatures
    extract: Callable[[bytes], ParsedText]

    def parse(self, data: bytes) -> ParseResult:
        """Run the backend, timing it and wrapping any failure in :class:`ParseError`."""
        start = time.perf_counter()
        try:
            parsed = self.extract(data)
        except Exception as exc:
            raise ParseError(self.name, str(exc) or type(exc).__name__) from exc
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        return ParseResult(
            text=parsed.text or "",
            metadata=parsed.metadata,
            parse_time=elapsed_ms,
            parser_used=self.name,
        )


PARSER_REGISTRY: dict[str, ParserBackend] = {
    "pdf-parse": ParserBackend(
        name="pdf-parse",
        description=(
            "Fast PDF text extraction using pypdf. "
            "Good for standard PDFs with embedded text."
        ),
        features=ParserFeatures(extract_text=True, extract_metadata=True),
        extract=parse_with_pypdf,
    ),
    "pdfplumber": ParserBackend(
        name="pdfplumber",
        description=(
            "Layout-preserving extraction using pdfplumber. "
            "Slower, but keeps columns and tables readable."
        ),
        features=ParserFeatures(
            extract_text=True,
            extract_metadata=True,
            preserve_formatting=True,
        ),
        extract=parse_with_pdfplumber,
    ),
    "mock": ParserBackend(
        name="mock",
        description="Mock parser for testing purposes. Returns sample text.",
        features=ParserFeatures(
            extract_text=True,
            extract_metadata=True,
            handle_encrypted=True,
        ),
        extract=parse_with_mock,
    ),
}
"""Mapping of parser name → backend, in selection-priority order."""


def get_parser(name: str) -> ParserBackend:
    """Return the backend registered under *name*.

    Raises
    ------
    ParserNotFoundError
        If *name* is not registered; the message lists every valid name.
    """
    try:
        return PARSER_REGISTRY[name]
    except KeyError:
        raise ParserNotFoundError(name, list(PARSER_REGISTRY)) from None


def list_parsers() -> list[dict[str, Any]]:
    """Describe every registered backend (name, description, features)."""
    return [
        {
            "name": backend.name,
            "description": backend.description,
            "features": backend.features.model_dump(),
        }
        for backend in PARSER_REGISTRY.values()
    ]


def select_parser(
    requirements: Mapping[str, bool] | None = None,
    *,
    default: str = DEFAULT_PARSER,
) -> str:
    """Pick the first backend supporting every requested capability.

    Falsy requirements are ignored.  Unknown capability names are never
    satisfied.  Without requirements, or when no backend qualifies,
    *default* is returned.
    """
    if not requirements:
        return default

    known = set(ParserFeatures.model_fields)
    unknown = sorted(set(requirements) - known)
    if unknown:
        logger.warning("Unknown parser capabilities: %s", ", ".join(unknown))

    wanted = [feature for feature, required in requirements.items() if required]
    for backend in PARSER_REGISTRY.values():
        if all(f in known and getattr(backend.features, f) for f in wanted):
            return backend.name

    logger.info("No parser satisfies %s; using default %r", wanted, default)
    return default


def parse_pdf(
    data: bytes,
    parser: str | None = None,
    *,
    fallback_to_mock: bool = False,
    requirements: Mapping[str, bool] | None = None,
) -> ParseResult:
    """Parse *data* with the chosen backend.

    Parameters
    ----------
    data:
        Raw PDF bytes.
    parser:
        Backend name.  When omitted the backend is chosen from
        *requirements*, or :data:`DEFAULT_PARSER`.
    fallback_to_mock:
        Retry with the ``mock`` backend when parsing fails.  Only meant
        for development.
    requirements:
        Capability flags forwarded to :func:`select_parser`.
    """
    name = parser or select_parser(requirements)
    backend = get_parser(name)
    logger.info("Using PDF parser: %s", name)

    try:
        result = backend.parse(data)
    except ParseError:
        logger.exception("PDF parsing failed with %s", name)
        if fallback_to_mock and name != MOCK_PARSER:
            logger.warning("Falling back to mock parser")
            return parse_pdf(data, MOCK_PARSER)
        raise

    logger.info("PDF parsed successfully with %s in %dms", name, result.parse_time)
    logger.info(
        "Extracted %d characters from %s pages",
        len(result.text),
        result.metadata.pages or "unknown",
    )
    return result
