"""Unit tests for the serving layer."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from philo_rag.config import settings
from philo_rag.feedback import FeedbackRecord, FeedbackType, InMemoryFeedbackStore
from philo_rag.serving.app import app
from philo_rag.serving.dependencies import (
    get_embedder,
    get_feedback,
    get_optional_embedder,
    get_store,
)
from philo_rag.storage import InMemoryChunkStore
from philo_rag.storage.client import get_supabase_client

METADATA = json.dumps({"title": "Enchiridion", "author": "Epictetus", "topic": "Stoicism"})


@pytest.fixture()
def chunk_store() -> InMemoryChunkStore:
    return InMemoryChunkStore()


@pytest.fixture()
def feedback_store() -> InMemoryFeedbackStore:
    return InMemoryFeedbackStore()


@pytest.fixture()
def client(chunk_store, feedback_store, fake_embedder):
    app.dependency_overrides[get_embedder] = lambda: fake_embedder
    app.dependency_overrides[get_optional_embedder] = lambda: fake_embedder
    app.dependency_overrides[get_store] = lambda: chunk_store
    app.dependency_overrides[get_feedback] = lambda: feedback_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _files(*texts: str) -> list[tuple]:
    return [
        ("files", (f"doc{i}.pdf", text.encode("utf-8"), "application/pdf"))
        for i, text in enumerate(texts)
    ]


def test_health_endpoint() -> None:
    """GET /health should return 200 with status ok."""
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_readiness_consults_chunk_store(client) -> None:
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


def test_readiness_reports_unavailable_store(client) -> None:
    class DownStore(InMemoryChunkStore):
        def health_check(self) -> bool:
            return False

    app.dependency_overrides[get_store] = lambda: DownStore()
    response = client.get("/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


def test_list_parsers(client) -> None:
    response = client.get("/api/parsers")
    assert response.status_code == 200
    body = response.json()
    assert body["default"] == "pdf-parse"
    assert [p["name"] for p in body["parsers"]] == ["pdf-parse", "pdfplumber", "mock"]


# ── Preview ─────────────────────────────────────────────────────────────


def test_preview_returns_chunk_stats(client, text_parser, make_paragraphs) -> None:
    response = client.post(
        "/api/preview-chunks",
        files=_files(make_paragraphs(3), make_paragraphs(1)),
        data={"chunkSize": "100", "chunkOverlap": "0", "pdfParser": text_parser},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    stats = body["chunkStats"]
    assert stats["total_chunks"] == 4
    assert stats["min_length"] <= stats["avg_length"] <= stats["max_length"]
    assert stats["first_chunk"]["index"] == 0
    assert stats["last_chunk"]["index"] == 3
    assert len(stats["all_chunks"]) == 4
    assert stats["parsing_info"]["parser_used"] == "fixture"
    assert [m["filename"] for m in stats["parsing_info"]["files_metadata"]] == [
        "doc0.pdf",
        "doc1.pdf",
    ]
    file_info = stats["parsing_info"]["files_metadata"][0]
    assert file_info["parserUsed"] == "fixture"
    assert file_info["parseTime"] >= 0
    assert file_info["title"] == "Fixture"
    assert "creationDate" in file_info
    assert "parser_used" not in file_info


def test_preview_falls_back_to_default_sizes(client, text_parser) -> None:
    response = client.post(
        "/api/preview-chunks",
        files=_files("word " * 2400),
        data={"chunkSize": "abc", "chunkOverlap": "0", "pdfParser": text_parser},
    )

    assert response.status_code == 200
    stats = response.json()["chunkStats"]
    assert stats["total_chunks"] >= 3
    assert stats["max_length"] <= 5000


def test_preview_without_files(client) -> None:
    response = client.post("/api/preview-chunks", data={"chunkSize": "100"})
    assert response.status_code == 400
    assert response.json() == {"error": "No files provided"}


def test_preview_unknown_parser(client) -> None:
    response = client.post(
        "/api/preview-chunks", files=_files("text"), data={"pdfParser": "tesseract-ocr"}
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert "Parser 'tesseract-ocr' not found" in error
    assert "pdf-parse, pdfplumber, mock" in error


def test_preview_overlap_not_smaller_than_size(client, text_parser) -> None:
    response = client.post(
        "/api/preview-chunks",
        files=_files("text"),
        data={"chunkSize": "100", "chunkOverlap": "100", "pdfParser": text_parser},
    )
    assert response.status_code == 400
    assert "chunk_overlap (100) must be < chunk_size (100)" in response.json()["error"]


def test_preview_unparseable_pdf(client) -> None:
    response = client.post("/api/preview-chunks", files=_files("not a pdf"))
    assert response.status_code == 400
    assert response.json()["error"].startswith("Failed to process file doc0.pdf")


def test_preview_invalid_metadata_json(client, text_parser) -> None:
    response = client.post(
        "/api/preview-chunks",
        files=_files("text"),
        data={"metadata": "{not json", "pdfParser": text_parser},
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("Metadata is not valid JSON")


def test_preview_no_text(client, text_parser) -> None:
    response = client.post(
        "/api/preview-chunks", files=_files("   "), data={"pdfParser": text_parser}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "No chunks could be generated from the files"}


# ── Upload ──────────────────────────────────────────────────────────────


def test_upload_stores_chunks(client, chunk_store, text_parser, make_paragraphs) -> None:
    response = client.post(
        "/api/upload-documents",
        files=_files(make_paragraphs(4)),
        data={
            "metadata": METADATA,
            "chunkSize": "100",
            "chunkOverlap": "0",
            "pdfParser": text_parser,
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "documentsCount": 1,
        "chunksCount": 4,
        "failedChunks": 0,
        "failedFiles": [],
        "status": "complete",
        "message": "Successfully processed 1 documents with 4 chunks",
    }
    assert [r.chunk_id for r in chunk_store.records] == [1, 2, 3, 4]
    assert chunk_store.records[0].author == "Epictetus"


def test_upload_reports_partial_success(
    client, chunk_store, text_parser, make_embedder, make_paragraphs
) -> None:
    app.dependency_overrides[get_embedder] = lambda: make_embedder(fail_on={4})

    response = client.post(
        "/api/upload-documents",
        files=_files(make_paragraphs(10)),
        data={
            "metadata": METADATA,
            "chunkSize": "100",
            "chunkOverlap": "0",
            "pdfParser": text_parser,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["documentsCount"] == 1
    assert body["chunksCount"] == 9
    assert body["failedChunks"] == 1
    assert body["status"] == "partial"


def test_upload_requires_metadata(client, text_parser) -> None:
    response = client.post(
        "/api/upload-documents", files=_files("text"), data={"pdfParser": text_parser}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Metadata is required"}


def test_upload_without_files(client) -> None:
    response = client.post("/api/upload-documents", data={"metadata": METADATA})
    assert response.status_code == 400
    assert response.json() == {"error": "No files provided"}


@pytest.fixture()
def unconfigured_client(monkeypatch: pytest.MonkeyPatch):
    """Client with the real dependencies and no OpenAI or Supabase credentials."""
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "storage_backend", "supabase")
    monkeypatch.setattr(settings, "supabase_url", "")
    monkeypatch.setattr(settings, "supabase_service_role_key", "")
    get_supabase_client.cache_clear()
    app.dependency_overrides.clear()
    yield TestClient(app)
    get_supabase_client.cache_clear()


def test_upload_without_files_when_unconfigured(unconfigured_client) -> None:
    response = unconfigured_client.post("/api/upload-documents", data={"metadata": "{}"})
    assert response.status_code == 400
    assert response.json() == {"error": "No files provided"}


def test_upload_without_metadata_when_unconfigured(unconfigured_client) -> None:
    response = unconfigured_client.post("/api/upload-documents", files=_files("text"))
    assert response.status_code == 400
    assert response.json() == {"error": "Metadata is required"}


def test_valid_upload_when_unconfigured_reports_embedder(unconfigured_client) -> None:
    response = unconfigured_client.post(
        "/api/upload-documents", files=_files("text"), data={"metadata": METADATA}
    )
    assert response.status_code == 502
    assert response.json() == {"error": "Embeddings are not configured: set OPENAI_API_KEY"}


def test_upload_rejects_non_object_metadata(client, text_parser) -> None:
    response = client.post(
        "/api/upload-documents",
        files=_files("text"),
        data={"metadata": "[1, 2]", "pdfParser": text_parser},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Metadata must be a JSON object"}


def test_unexpected_errors_return_500(client) -> None:
    def _broken():
        raise RuntimeError("socket closed")

    app.dependency_overrides[get_embedder] = _broken
    response = TestClient(app, raise_server_exceptions=False).post(
        "/api/upload-documents", files=_files("text"), data={"metadata": METADATA}
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


# ── Feedback ────────────────────────────────────────────────────────────


def test_submit_feedback_embeds_query(client, feedback_store, fake_embedder) -> None:
    response = client.post(
        "/api/feedback",
        json={
            "user_query": "What is apatheia?",
            "ai_response": "Freedom from disturbing passions.",
            "feedback_type": "helpful",
            "rating": 5,
            "comment": "Clear",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["hasEmbedding"] is True
    stored = feedback_store.records[0]
    assert str(stored.id) == body["id"]
    assert fake_embedder.calls == ["What is apatheia?"]


def test_submit_feedback_without_embedder(client, feedback_store) -> None:
    app.dependency_overrides[get_optional_embedder] = lambda: None

    response = client.post(
        "/api/feedback",
        json={"user_query": "q", "ai_response": "a", "feedback_type": "partial"},
    )

    assert response.status_code == 200
    assert response.json()["hasEmbedding"] is False
    assert feedback_store.records[0].query_embedding is None


def test_submit_feedback_validation(client) -> None:
    response = client.post(
        "/api/feedback",
        json={"user_query": "q", "ai_response": "a", "feedback_type": "amazing"},
    )
    assert response.status_code == 400
    assert "feedback_type" in response.json()["error"]


def test_similar_feedback(client, feedback_store, fake_embedder) -> None:
    vector = fake_embedder.embed_query("What is virtue?")
    feedback_store.insert(
        FeedbackRecord(
            user_query="What is virtue?",
            ai_response="Excellence.",
            feedback_type=FeedbackType.DETAILED,
            comment="Cite Aristotle too",
            query_embedding=vector,
        )
    )

    response = client.post(
        "/api/feedback/similar", json={"query": "What is virtue?", "matchThreshold": 0.8}
    )

    assert response.status_code == 200
    matches = response.json()
    assert len(matches) == 1
    assert matches[0]["comment"] == "Cite Aristotle too"
    assert matches[0]["similarity"] == pytest.approx(1.0)


def test_feedback_stats_and_trends(client, feedback_store) -> None:
    feedback_store.insert(
        FeedbackRecord(
            user_query="q", ai_response="a", feedback_type=FeedbackType.HELPFUL, rating=4
        )
    )

    stats = client.get("/api/feedback/stats").json()
    assert stats["total_feedback"] == 1
    assert stats["avg_rating"] == 4.0

    trends = client.get("/api/feedback/trends").json()
    assert len(trends) == 1
    assert trends[0]["helpful_count"] == 1
