"""
PDF Generator - FastAPI application for URL to PDF rendering.

Provides a health probe and an endpoint that renders a web page with
Playwright/Chromium and returns it as a PDF attachment.
"""

import logging
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from io import BytesIO
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import GeneratorSettings, get_settings, validate_config_on_startup
from .errors import error_category
from .logger import get_logger, new_request_id, setup_logging
from .renderer import MISSING_URL_MESSAGE, generate_pdf

SERVICE_NAME = "PDF Generator"
DEFAULT_FILENAME = "document.pdf"
GENERATION_FAILED = "Failed to generate PDF"

service_settings = get_settings()
setup_logging(service_settings.log_level, service_settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration before accepting requests."""
    validate_config_on_startup()
    logger.info(f"PDF service running on port {service_settings.port}")
    yield
    logger.info("PDF service shutting down")


app = FastAPI(
    title="PDF Generator",
    version=__version__,
    description="Renders web pages to PDF using Playwright/Chromium",
    lifespan=lifespan,
)

if service_settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=service_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "OK"
    service: str = SERVICE_NAME
    timestamp: datetime


class GeneratePDFRequest(BaseModel):
    """URL to PDF request."""
    url: Optional[str] = Field(None, description="Page to render")
    filename: Optional[str] = Field(
        DEFAULT_FILENAME,
        description="Filename sent in the Content-Disposition header"
    )


class ErrorResponse(BaseModel):
    """Failure payload for /generate-pdf."""
    error: str = GENERATION_FAILED
    message: str


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Make a caller-supplied filename safe for a quoted header value.

    Quotes, backslashes, control and non-ASCII characters become
    underscores. Blank names fall back to the default.

    Example:
        >>> sanitize_filename('q3 "final".pdf')
        'q3 _final_.pdf'
    """
    if not filename or not filename.strip():
        return DEFAULT_FILENAME
    return re.sub(r'[^\x20-\x7e]|["\\]', "_", filename.strip())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report unusable /generate-pdf bodies with the uniform failure payload.

    A missing body, malformed JSON or a non-string url leaves nothing to
    navigate to, so the request fails like a navigation failure (500) rather
    than with a 422.
    """
    if request.url.path != "/generate-pdf":
        return await request_validation_exception_handler(request, exc)

    logger.warning(f"Rejected /generate-pdf body: {exc.errors()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message=MISSING_URL_MESSAGE).model_dump(),
    )


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness probe for the reverse proxy and process supervisor.

    Never touches the browser; succeeds whenever the process is alive.
    """
    return HealthResponse(timestamp=datetime.now(timezone.utc))


@app.post("/generate-pdf", responses={500: {"model": ErrorResponse}})
async def generate_pdf_endpoint(
    request: GeneratePDFRequest,
    settings: GeneratorSettings = Depends(get_settings),
):
    """
    Render request.url to PDF.

    Returns:
        The PDF as an attachment, or 500 with {error, message} on any
        launch, navigation, liveness or export failure
    """
    request_id = new_request_id()
    log = get_logger(__name__, request_id)
    filename = sanitize_filename(request.filename)

    try:
        pdf_bytes = await generate_pdf(request.url, settings=settings, request_id=request_id)
    except Exception as e:
        message = str(e) or type(e).__name__
        log.exception(f"PDF generation error [{error_category(e)}]: {message}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message=message).model_dump(),
        )

    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(pdf_bytes)),
        }
    )


def main() -> None:
    """Run the service with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        app,
        host=service_settings.host,
        port=service_settings.port,
        log_level=service_settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
