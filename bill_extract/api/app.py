"""FastAPI application for the bill amount extraction API.

Provides the upload endpoint, a health check, and OpenAPI docs served
under ``/api-docs``.
"""

import shutil
from functools import lru_cache
from typing import Annotated

from fastapi import FastAPI, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bill_extract import __version__
from bill_extract.extraction.errors import (
    ExternalCallFailed,
    ExtractionError,
    MalformedExternalResponse,
    NoAccessibleModel,
    NoInput,
    RecognitionFailed,
)
from bill_extract.extraction.models import StructuredResult
from bill_extract.extraction.orchestrator import (
    ExtractionOrchestrator,
    build_orchestrator,
)
from bill_extract.utils.config import AppConfig, load_config
from bill_extract.utils.logger import get_logger

from .schemas import ErrorResponse, HealthResponse

logger = get_logger(__name__)

app = FastAPI(
    title="Bill Amount Extraction API",
    description="Extract total, paid and due amounts from bill images",
    version=__version__,
    docs_url="/api-docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/tiff",
    "image/webp",
    "image/bmp",
    "application/octet-stream",
}


@lru_cache(maxsize=1)
def _get_config() -> AppConfig:
    return load_config()


@lru_cache(maxsize=1)
def _get_orchestrator() -> ExtractionOrchestrator:
    """Build the shared orchestrator on first use."""
    return build_orchestrator(_get_config())


def _error_response(exc: ExtractionError) -> JSONResponse:
    """Map a pipeline error to its HTTP status and JSON body.

    Args:
        exc: Error raised by the orchestrator.

    Returns:
        JSON response for the client.
    """
    if isinstance(exc, NoInput):
        status_code, body = 400, ErrorResponse(error=exc.message)
    elif isinstance(exc, ExternalCallFailed):
        status_code = 429 if exc.rate_limited else 502
        body = ErrorResponse(
            error=exc.message,
            status=exc.status_code,
            status_text=exc.status_text,
            hint=exc.hint,
        )
    elif isinstance(exc, NoAccessibleModel):
        status_code, body = 404, ErrorResponse(error=exc.message, hint=exc.hint)
    elif isinstance(exc, (MalformedExternalResponse, RecognitionFailed)):
        status_code, body = 500, ErrorResponse(error=exc.message)
    else:
        status_code, body = 500, ErrorResponse(error="Failed to process image.")
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health status."""
    config = _get_config()
    tesseract = config.ocr.tesseract_cmd or "tesseract"
    return HealthResponse(
        status="UP and RUNNING",
        version=__version__,
        tesseract_available=shutil.which(tesseract) is not None,
        cache_dir=config.storage.upload_dir,
    )


@app.post(
    "/extract-amounts",
    response_model=StructuredResult,
    responses={
        400: {"model": ErrorResponse, "description": "No file uploaded."},
        404: {"model": ErrorResponse, "description": "No accessible model."},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded."},
        500: {"model": ErrorResponse, "description": "Failed to process image."},
        502: {"model": ErrorResponse, "description": "LLM call failed."},
    },
)
async def extract_amounts(
    bill_image: Annotated[UploadFile | None, File(alias="billImage")] = None,
) -> StructuredResult | JSONResponse:
    """Extract monetary amounts from an uploaded bill image.

    Args:
        bill_image: Uploaded bill image (PNG, JPEG, TIFF, WebP or BMP).

    Returns:
        Currency and the total, paid and due amounts found on the bill.
    """
    if bill_image is None:
        return _error_response(NoInput())

    content_type = bill_image.content_type
    if content_type and content_type not in _ALLOWED_CONTENT_TYPES:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error=f"Unsupported file type: {content_type}"
            ).model_dump(exclude_none=True),
        )

    content = await bill_image.read()
    try:
        orchestrator = _get_orchestrator()
        return await run_in_threadpool(orchestrator.process, content)
    except ExtractionError as exc:
        logger.error("Extraction failed: %s", exc)
        return _error_response(exc)
    except Exception:
        logger.exception("Error processing image")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to process image.").model_dump(
                exclude_none=True
            ),
        )
