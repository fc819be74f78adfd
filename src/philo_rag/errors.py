"""Exception hierarchy shared by the parsing, ingestion and storage layers.

Every exception carries the HTTP status the serving layer should answer
with, so route handlers can simply let them propagate.
"""

from __future__ import annotations


class PhiloRagError(Exception):
    """Base class for all expected, user-reportable failures."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(PhiloRagError):
    """Structurally invalid request: no files, missing or malformed metadata."""


class ParserNotFoundError(PhiloRagError):
    """Requested parser backend is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Parser '{name}' not found. Available parsers: {', '.join(available)}")
        self.name = name
        self.available = available


class ParseError(PhiloRagError):
    """A parser backend could not decode its input.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, parser: str, reason: str) -> None:
        super().__init__(f"{parser} failed: {reason}")
        self.parser = parser


class ChunkingError(PhiloRagError, ValueError):
    """Invalid chunk size / overlap combination."""


class FileProcessingError(PhiloRagError):
    """A file in a preview request could not be processed."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Failed to process file {filename}: {reason}")
        self.filename = filename


class NoChunksError(PhiloRagError):
    """No chunk could be generated from any of the submitted files."""

    def __init__(self) -> None:
        super().__init__("No chunks could be generated from the files")


class EmbeddingError(PhiloRagError):
    """The embedding service failed or returned an unusable vector."""

    status_code = 502


class StorageError(PhiloRagError):
    """A write or query against the backing database failed."""

    status_code = 502
