"""
Parsing: interchangeable PDF-to-text backends behind one entry point.

Public surface
--------------
- :func:`parse_pdf`: resolve a backend, parse, optionally fall back to ``mock``.
- :func:`get_parser`, :func:`list_parsers`, :func:`select_parser`: registry access.
- :class:`ParseResult`, :class:`PdfMetadata`, :class:`ParserFeatures`: data models.
"""

from philo_rag.parsing.models import ParseResult, ParserFeatures, PdfMetadata
from philo_rag.parsing.registry import (
    DEFAULT_PARSER,
    PARSER_REGISTRY,
    ParserBackend,
    get_parser,
    list_parsers,
    parse_pdf,
    select_parser,
)

__all__ = [
    "DEFAULT_PARSER",
    "PARSER_REGISTRY",
    "ParseResult",
    "ParserBackend",
    "ParserFeatures",
    "PdfMetadata",
    "get_parser",
    "list_parsers",
    "parse_pdf",
    "select_parser",
]
