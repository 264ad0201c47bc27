"""FastAPI application factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from resume_customizer.api.routes import router
from resume_customizer.errors import (
    ArchiveError,
    ConfigurationError,
    ExtractionError,
    PDFGenerationError,
    ResumeCustomizerError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Map errors to HTTP status codes
EXCEPTION_STATUS_MAP = {
    ValidationError: 400,
    ArchiveError: 404,
    ConfigurationError: 500,
    PDFGenerationError: 500,
}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_dotenv()

    app = FastAPI(
        title="Resume Customizer API",
        description="Job-description-driven resume customization",
        version="0.1.0",
    )
    app.include_router(router, tags=["Resume"])

    @app.exception_handler(ResumeCustomizerError)
    async def resume_customizer_error_handler(request: Request, exc: ResumeCustomizerError):
        if isinstance(exc, ExtractionError):
            status_code = exc.status_code
        else:
            status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        content: dict = {"success": False, "error": str(exc)}
        if exc.details.get("errors"):
            content["details"] = exc.details["errors"]
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health", tags=["System"])
    async def health():
        return {"status": "ok"}

    return app
