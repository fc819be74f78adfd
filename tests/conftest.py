"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import io

import pytest
from langchain_core.embeddings import Embeddings
from pypdf import PdfWriter

from philo_rag.parsing import PARSER_REGISTRY, ParserBackend, ParserFeatures, PdfMetadata
from philo_rag.parsing.backends import ParsedText


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeEmbedder(Embeddings):
    """Deterministic embedder that can be told to fail on given calls.

    Parameters
    ----------
    dim:
        Width of the returned vectors.
    fail_on:
        1-based call numbers of ``embed_query`` that raise.
    """

    def __init__(self, dim: int = 1536, fail_on: set[int] | None = None) -> None:
        self.dim = dim
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        if len(self.calls) in self.fail_on:
            raise RuntimeError("embedding service unavailable")
        return [float(len(text) % 7 + 1)] + [0.5] * (self.dim - 1)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def text_parser(monkeypatch: pytest.MonkeyPatch) -> str:
    """Register a ``fixture`` parser that decodes the uploaded bytes as UTF-8 text."""

    def _extract(data: bytes) -> ParsedText:
        return ParsedText(data.decode("utf-8"), PdfMetadata(pages=1, title="Fixture"))

    backend = ParserBackend(
        name="fixture",
        description="Test parser returning the raw bytes as text.",
        features=ParserFeatures(),
        extract=_extract,
    )
    monkeypatch.setitem(PARSER_REGISTRY, "fixture", backend)
    return "fixture"


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def make_embedder() -> type[FakeEmbedder]:
    """The :class:`FakeEmbedder` class, for tests that need custom failures."""
    return FakeEmbedder


@pytest.fixture(scope="session")
def sample_pdf() -> bytes:
    """A one-page blank PDF with a populated information dictionary."""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_metadata(
        {
            "/Title": "Sample Lecture",
            "/Author": "Ada Lovelace",
            "/Subject": "Analytical engines",
            "/Keywords": "computing, history",
            "/CreationDate": "D:20240102030405Z",
        }
    )
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def make_paragraphs():
    """Build ``count`` paragraphs of exactly ``width`` characters, blank-line separated."""

    def _make(count: int, width: int = 80) -> str:
        return "\n\n".join(f"Paragraph {i:02d} ".ljust(width, "z") for i in range(count))

    return _make
