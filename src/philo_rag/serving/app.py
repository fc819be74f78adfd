"""FastAPI application exposing the ingestion backend as a REST API."""

from __future__ import annotations

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from philo_rag import __version__
from philo_rag.logging_setup import configure_logging
from philo_rag.serving.dependencies import get_store
from philo_rag.serving.errors import attach_error_handlers
from philo_rag.serving.routes import documents, feedback
from philo_rag.storage import ChunkStoreBase


def create_app() -> FastAPI:
    """Build the application with logging, error handlers and routes."""
    configure_logging()
    application = FastAPI(
        title="PHILO RAG Ingestion API",
        version=__version__,
        description="PDF chunk preview, embedding upload and answer feedback.",
    )
    attach_error_handlers(application)
    application.include_router(documents.router)
    application.include_router(feedback.router)

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @application.get("/health/ready")
    def ready(store: ChunkStoreBase = Depends(get_store)) -> JSONResponse:
        """Readiness probe: the chunk store must answer."""
        if store.health_check():
            return JSONResponse({"status": "ready"})
        return JSONResponse({"status": "unavailable"}, status_code=503)

    return application


app = create_app()


def main() -> None:
    """Console entry point: serve :data:`app` with uvicorn."""
    uvicorn.run("philo_rag.serving.app:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
