"""Pydantic response schemas for the FastAPI endpoints.

Successful extractions return :class:`~bill_extract.extraction.models.StructuredResult`
directly; the models here cover health checks and error bodies.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response schema for a failed extraction request."""

    error: str
    status: int | None = None
    status_text: str | None = None
    hint: str | None = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    cache_dir: str
