"""Exception handlers translating failures into ``{"error": ...}`` payloads."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from philo_rag.errors import PhiloRagError

logger = logging.getLogger(__name__)


def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PhiloRagError)
    async def _expected(request: Request, exc: PhiloRagError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        reason = first.get("msg", "invalid value")
        message = f"Invalid {field}: {reason}" if field else "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
