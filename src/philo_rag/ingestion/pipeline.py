"""Preview and ingestion pipelines.

Both pipelines walk the submitted files strictly in order:

    parse → chunk → (statistics | context text → embed → store)

The preview path is a dry run with no external calls besides parsing.
The ingestion path isolates failures: a chunk whose embedding or insert
fails is logged and skipped, and a file that cannot be parsed is logged
and skipped, so one upload request never fails as a whole.

Usage::

    from philo_rag.ingestion.pipeline import ingest_documents

    report = ingest_documents(files, metadata, options, embedder=embedder, store=store)
    print(report.documents_count, report.chunks_count, report.status)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from philo_rag.errors import (
    EmbeddingError,
    FileProcessingError,
    NoChunksError,
    ParseError,
    PhiloRagError,
    StorageError,
)
from philo_rag.ingestion.chunker import build_splitter, split_text
from philo_rag.ingestion.embedder import build_context_text, embed_text
from philo_rag.ingestion.models import (
    Chunk,
    ChunkingOptions,
    ChunkStats,
    DocumentMetadata,
    FileParseInfo,
    IngestionReport,
    ParsingInfo,
    UploadedFile,
)
from philo_rag.ingestion.stats import compute_chunk_stats
from philo_rag.parsing import ParseResult, get_parser, parse_pdf
from philo_rag.storage.models import StoredChunkRecord

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from philo_rag.storage.base import ChunkStoreBase

logger = logging.getLogger(__name__)


def _parse(file: UploadedFile, options: ChunkingOptions) -> ParseResult:
    logger.info(
        "Parsing %s (%.1fKB) with %s", file.filename, file.size / 1024, options.pdf_parser
    )
    return parse_pdf(
        file.data,
        options.pdf_parser,
        fallback_to_mock=options.fallback_to_mock,
    )


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


def preview_chunks(files: Sequence[UploadedFile], options: ChunkingOptions) -> ChunkStats:
    """Parse and chunk *files* and return statistics; nothing is persisted.

    Raises
    ------
    FileProcessingError
        If any file fails to parse or chunk.
    NoChunksError
        If no file produced a single chunk.
    """
    # Fail fast on bad parameters before touching any file.
    build_splitter(options.splitter_type, options.chunk_size, options.chunk_overlap)
    get_parser(options.pdf_parser)

    all_chunks: list[Chunk] = []
    files_metadata: list[FileParseInfo] = []
    total_parse_time = 0

    for file in files:
        try:
            result = _parse(file, options)
            total_parse_time += result.parse_time
            files_metadata.append(
                FileParseInfo(
                    filename=file.filename,
                    parser_used=result.parser_used,
                    parse_time=result.parse_time,
                    **result.metadata.model_dump(),
                )
            )

            if not result.text.strip():
                logger.warning("No text extracted from %s", file.filename)
                continue

            chunks = split_text(
                result.text,
                options.splitter_type,
                options.chunk_size,
                options.chunk_overlap,
            )
        except ParseError as exc:
            raise FileProcessingError(file.filename, exc.message) from exc
        except PhiloRagError:
            raise
        except Exception as exc:
            logger.exception("Error processing file %s", file.filename)
            raise FileProcessingError(file.filename, str(exc) or type(exc).__name__) from exc
        logger.info("Created %d chunks from %s", len(chunks), file.filename)

        offset = len(all_chunks)
        all_chunks.extend(
            chunk.model_copy(update={"index": offset + chunk.index}) for chunk in chunks
        )

    if not all_chunks:
        logger.error("No chunks could be generated from any files")
        raise NoChunksError()

    stats = compute_chunk_stats(
        all_chunks,
        ParsingInfo(
            total_parse_time=total_parse_time,
            parser_used=options.pdf_parser,
            files_metadata=files_metadata,
        ),
    )
    logger.info(
        "Chunk statistics: total=%d avg=%d min=%d max=%d",
        stats.total_chunks,
        stats.avg_length,
        stats.min_length,
        stats.max_length,
    )
    return stats


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


def build_record(
    chunk: Chunk,
    total_chunks: int,
    embedding: list[float],
    metadata: DocumentMetadata,
    file: UploadedFile,
    parse_result: ParseResult,
) -> StoredChunkRecord:
    """Assemble the persisted row for one chunk."""
    return StoredChunkRecord(
        content=chunk.content,
        embedding=embedding,
        title=metadata.title,
        author=metadata.author,
        doc_type=metadata.doc_type or "Book",
        genre=metadata.genre,
        topic=metadata.topic,
        difficulty=metadata.difficulty,
        tags=metadata.tags,
        summary=metadata.description,
        chunk_id=chunk.index + 1,
        total_chunks=total_chunks,
        source=file.filename,
        metadata={
            **metadata.model_dump(mode="json", exclude_none=True),
            "chunk_index": chunk.index,
            "total_chunks": total_chunks,
            "filename": file.filename,
            "file_size": file.size,
            "parser_used": parse_result.parser_used,
            "parse_time": parse_result.parse_time,
            "pdf_metadata": parse_result.metadata.model_dump(mode="json", exclude_none=True),
        },
    )


def ingest_documents(
    files: Sequence[UploadedFile],
    metadata: DocumentMetadata,
    options: ChunkingOptions,
    *,
    embedder: Embeddings,
    store: ChunkStoreBase,
    embedding_dimensions: int | None = None,
) -> IngestionReport:
    """Parse, chunk, embed and store every file, one chunk at a time.

    Parameters
    ----------
    files:
        Uploaded documents, processed in order.
    metadata:
        Document fields applied to every stored chunk.
    options:
        Splitter and parser settings.
    embedder:
        Any LangChain ``Embeddings``; only ``embed_query`` is used.
    store:
        Destination for the chunk rows.
    embedding_dimensions:
        Expected vector width; mismatching vectors count as failed chunks.

    Returns
    -------
    IngestionReport
        Files attempted, chunks stored and what was dropped.
    """
    build_splitter(options.splitter_type, options.chunk_size, options.chunk_overlap)
    get_parser(options.pdf_parser)
    report = IngestionReport()

    for file in files:
        try:
            result = _parse(file, options)
            logger.info("Extracted %d characters from %s", len(result.text), file.filename)
            if not result.text.strip():
                logger.warning("No text extracted from %s for upload", file.filename)
                continue

            chunks = split_text(
                result.text,
                options.splitter_type,
                options.chunk_size,
                options.chunk_overlap,
            )
            if not chunks:
                logger.warning("No chunks created from %s", file.filename)
                continue

            logger.info(
                "Generating embeddings and storing %d chunks from %s", len(chunks), file.filename
            )
            for chunk in chunks:
                stored = _store_chunk(
                    chunk,
                    len(chunks),
                    metadata,
                    file,
                    result,
                    embedder,
                    store,
                    embedding_dimensions,
                )
                if stored:
                    report.chunks_count += 1
                else:
                    report.failed_chunks += 1

            report.documents_count += 1
            logger.info("Processed %s", file.filename)
        except Exception:
            logger.exception("Error processing file %s", file.filename)
            report.failed_files.append(file.filename)

    logger.info(
        "Upload completed: %d documents, %d chunks (%d chunks failed, %d files failed)",
        report.documents_count,
        report.chunks_count,
        report.failed_chunks,
        len(report.failed_files),
    )
    return report


def _store_chunk(
    chunk: Chunk,
    total_chunks: int,
    metadata: DocumentMetadata,
    file: UploadedFile,
    parse_result: ParseResult,
    embedder: Embeddings,
    store: ChunkStoreBase,
    embedding_dimensions: int | None,
) -> bool:
    """Embed and persist one chunk; return whether it was stored."""
    position = f"{chunk.index + 1}/{total_chunks}"
    try:
        context = build_context_text(chunk.content, metadata, file.filename)
        embedding = embed_text(embedder, context, dimensions=embedding_dimensions)
        store.insert(build_record(chunk, total_chunks, embedding, metadata, file, parse_result))
    except EmbeddingError as exc:
        logger.error(
            "Error generating embedding for chunk %s of %s: %s", position, file.filename, exc
        )
        return False
    except StorageError as exc:
        logger.error("Error storing chunk %s of %s: %s", position, file.filename, exc)
        return False

    logger.info("Stored chunk %s for %s", position, file.filename)
    return True
