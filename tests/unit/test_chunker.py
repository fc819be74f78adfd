"""Unit tests for the chunker module."""

from __future__ import annotations

import pytest
from langchain_text_splitters import CharacterTextSplitter, RecursiveCharacterTextSplitter

from philo_rag.errors import ChunkingError
from philo_rag.ingestion.chunker import (
    HTML_SEPARATORS,
    MARKDOWN_SEPARATORS,
    SPLITTER_TYPES,
    build_splitter,
    split_text,
)


def test_split_text_splits_long_text() -> None:
    """A text longer than chunk_size should be split."""
    long_text = "word " * 500  # ~2500 chars
    chunks = split_text(long_text, chunk_size=256, chunk_overlap=32)
    assert len(chunks) > 1
    assert all(c.length <= 256 for c in chunks)


def test_split_text_empty_input() -> None:
    """Blank text yields no chunks."""
    assert split_text("") == []
    assert split_text("   \n\n  ") == []


def test_chunks_are_indexed_in_order() -> None:
    chunks = split_text("word " * 500, chunk_size=256, chunk_overlap=32)
    assert [c.index for c in chunks] == list(range(len(chunks)))
    assert all(c.length == len(c.content) for c in chunks)


def test_recursive_example_overlap() -> None:
    """12,000 characters at 5000/500 give >= 3 chunks sharing ~500 characters."""
    text = "word " * 2400
    assert len(text) == 12_000

    chunks = split_text(text, "recursive", chunk_size=5000, chunk_overlap=500)

    assert len(chunks) >= 3
    assert all(c.length <= 5000 for c in chunks)
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.content[:400] in prev.content[-500:]


def test_chunks_cover_the_whole_text() -> None:
    text = " ".join(f"token{i}" for i in range(1500))
    chunks = split_text(text, chunk_size=300, chunk_overlap=50)

    assert text.startswith(chunks[0].content)
    assert text.endswith(chunks[-1].content)
    joined = " ".join(c.content for c in chunks)
    for i in range(1500):
        assert f"token{i}" in joined


def test_zero_overlap_chunks_do_not_repeat(make_paragraphs) -> None:
    chunks = split_text(make_paragraphs(10), chunk_size=100, chunk_overlap=0)
    assert len(chunks) == 10
    assert [c.content[:12] for c in chunks] == [f"Paragraph {i:02d}" for i in range(10)]


def test_character_splitter_uses_blank_lines(make_paragraphs) -> None:
    chunks = split_text(make_paragraphs(4), "character", chunk_size=100, chunk_overlap=0)
    assert len(chunks) == 4
    assert all(c.length == 80 for c in chunks)


def test_markdown_splitter_breaks_at_headings() -> None:
    text = "\n".join(f"## Section {i}\n" + "lorem ipsum " * 4 for i in range(4))
    chunks = split_text(text, "markdown", chunk_size=80, chunk_overlap=0)

    assert len(chunks) == 4
    assert all(c.content.startswith("## Section") for c in chunks)


def test_build_splitter_strategies() -> None:
    assert isinstance(build_splitter("character", 100, 10), CharacterTextSplitter)

    markdown = build_splitter("markdown", 100, 10)
    assert isinstance(markdown, RecursiveCharacterTextSplitter)
    assert markdown._separators == MARKDOWN_SEPARATORS

    html = build_splitter("html", 100, 10)
    assert html._separators == HTML_SEPARATORS

    assert isinstance(build_splitter("recursive", 100, 10), RecursiveCharacterTextSplitter)
    assert set(SPLITTER_TYPES) == {"recursive", "character", "markdown", "html"}


def test_unknown_splitter_falls_back_to_recursive(caplog: pytest.LogCaptureFixture) -> None:
    splitter = build_splitter("semantic", 100, 10)
    assert isinstance(splitter, RecursiveCharacterTextSplitter)
    assert "Unknown splitter type 'semantic'" in caplog.text


@pytest.mark.parametrize(
    ("chunk_size", "chunk_overlap"),
    [(100, 100), (100, 150), (0, 0), (-5, 0), (100, -1)],
)
def test_invalid_chunk_params_are_rejected(chunk_size: int, chunk_overlap: int) -> None:
    with pytest.raises(ChunkingError):
        split_text("some text", chunk_size=chunk_size, chunk_overlap=chunk_overlap)


def test_chunking_error_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="must be < chunk_size"):
        build_splitter("recursive", 10, 10)
