"""Chunk preview, document upload and parser listing routes.

Handlers are synchronous: FastAPI runs them in its threadpool, which
keeps the blocking parse / embed / insert round trips off the event loop.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile
from langchain_core.embeddings import Embeddings
from pydantic import ValidationError

from philo_rag.config import settings
from philo_rag.errors import InvalidRequestError
from philo_rag.ingestion.models import ChunkingOptions, DocumentMetadata, UploadedFile
from philo_rag.ingestion.pipeline import ingest_documents, preview_chunks
from philo_rag.parsing import list_parsers
from philo_rag.serving.dependencies import get_embedder, get_store
from philo_rag.serving.schemas import (
    ParserInfo,
    ParserListResponse,
    PreviewResponse,
    UploadResponse,
)
from philo_rag.storage import ChunkStoreBase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


# ── Form helpers ──────────────────────────────────────────────────────


def _int_or_default(raw: str | None, default: int) -> int:
    """Lenient integer parsing: blank or non-numeric values use *default*."""
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _read_files(files: list[UploadFile] | None) -> list[UploadedFile]:
    if not files:
        raise InvalidRequestError("No files provided")
    uploaded = [
        UploadedFile(
            filename=f.filename or f"document-{i + 1}.pdf",
            data=f.file.read(),
            content_type=f.content_type,
        )
        for i, f in enumerate(files)
    ]
    for f in uploaded:
        logger.info("File %s: %.1fKB, type: %s", f.filename, f.size / 1024, f.content_type)
    return uploaded


def _parse_metadata(raw: str | None) -> DocumentMetadata:
    if not raw:
        return DocumentMetadata()
    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidRequestError(f"Metadata is not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError("Metadata must be a JSON object")
    try:
        return DocumentMetadata.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequestError(f"Invalid metadata: {exc.errors()[0]['msg']}") from exc


def _options(
    splitter_type: str | None,
    chunk_size: str | None,
    chunk_overlap: str | None,
    pdf_parser: str | None,
) -> ChunkingOptions:
    return ChunkingOptions(
        splitter_type=splitter_type or settings.default_splitter_type,
        chunk_size=_int_or_default(chunk_size, settings.default_chunk_size),
        chunk_overlap=_int_or_default(chunk_overlap, settings.default_chunk_overlap),
        pdf_parser=pdf_parser or settings.default_pdf_parser,
        fallback_to_mock=settings.parser_fallback_enabled,
    )


# ── Routes ────────────────────────────────────────────────────────────


@router.post("/preview-chunks", response_model=PreviewResponse)
def preview(
    files: list[UploadFile] | None = File(default=None),
    metadata: str | None = Form(default=None),
    splitter_type: str | None = Form(default=None, alias="splitterType"),
    chunk_size: str | None = Form(default=None, alias="chunkSize"),
    chunk_overlap: str | None = Form(default=None, alias="chunkOverlap"),
    pdf_parser: str | None = Form(default=None, alias="pdfParser"),
) -> PreviewResponse:
    """Dry run: parse and chunk the files and report chunk statistics."""
    uploaded = _read_files(files)
    _parse_metadata(metadata)
    options = _options(splitter_type, chunk_size, chunk_overlap, pdf_parser)
    logger.info(
        "Preview request: %d files, splitter=%s, size=%d, overlap=%d, parser=%s",
        len(uploaded),
        options.splitter_type,
        options.chunk_size,
        options.chunk_overlap,
        options.pdf_parser,
    )

    stats = preview_chunks(uploaded, options)
    return PreviewResponse(chunk_stats=stats)


@dataclass(frozen=True)
class UploadRequest:
    files: list[UploadedFile]
    metadata: DocumentMetadata
    options: ChunkingOptions


def upload_form(
    files: list[UploadFile] | None = File(default=None),
    metadata: str | None = Form(default=None),
    splitter_type: str | None = Form(default=None, alias="splitterType"),
    chunk_size: str | None = Form(default=None, alias="chunkSize"),
    chunk_overlap: str | None = Form(default=None, alias="chunkOverlap"),
    pdf_parser: str | None = Form(default=None, alias="pdfParser"),
) -> UploadRequest:
    """Validate the upload form.

    Resolved before the embedder and store, so a malformed request is
    rejected even when neither is configured.
    """
    uploaded = _read_files(files)
    if not metadata:
        raise InvalidRequestError("Metadata is required")
    return UploadRequest(
        files=uploaded,
        metadata=_parse_metadata(metadata),
        options=_options(splitter_type, chunk_size, chunk_overlap, pdf_parser),
    )


@router.post("/upload-documents", response_model=UploadResponse)
def upload(
    form: UploadRequest = Depends(upload_form),
    embedder: Embeddings = Depends(get_embedder),
    store: ChunkStoreBase = Depends(get_store),
) -> UploadResponse:
    """Parse, chunk, embed and store the files; one row per chunk."""
    options = form.options
    logger.info(
        "Upload request: %d files, splitter=%s, size=%d, overlap=%d, parser=%s",
        len(form.files),
        options.splitter_type,
        options.chunk_size,
        options.chunk_overlap,
        options.pdf_parser,
    )

    report = ingest_documents(
        form.files,
        form.metadata,
        options,
        embedder=embedder,
        store=store,
        embedding_dimensions=settings.embedding_dimensions,
    )
    return UploadResponse(
        documents_count=report.documents_count,
        chunks_count=report.chunks_count,
        failed_chunks=report.failed_chunks,
        failed_files=report.failed_files,
        status=report.status,
        message=report.message,
    )


@router.get("/parsers", response_model=ParserListResponse)
def parsers() -> ParserListResponse:
    """List the registered PDF parser backends."""
    return ParserListResponse(
        parsers=[ParserInfo(**p) for p in list_parsers()],
        default=settings.default_pdf_parser,
    )
