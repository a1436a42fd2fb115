"""Exceptions raised by the extraction pipeline.

Every outcome the caller can act on has its own class so the HTTP layer
and the CLI can map them without inspecting messages.
"""

from typing import Any

RATE_LIMIT_HINT = "Rate limit exceeded. Please retry after some time."
ACCESS_HINT = "Check API key and model name or permissions in AI Studio."
NO_MODEL_HINT = (
    "Set GEMINI_MODEL in .env (or llm.model_override in the config) to a model "
    "you can access (e.g., gemini-1.5-pro, gemini-1.5-flash-8b) and restart."
)


class ExtractionError(Exception):
    """Base exception for every failure of the extraction pipeline."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NoInput(ExtractionError):
    """The upload was missing or empty."""

    def __init__(self, message: str = "No file uploaded.") -> None:
        super().__init__(message)


class RecognitionFailed(ExtractionError):
    """OCR could not produce text from the uploaded bytes."""


class NoAccessibleModel(ExtractionError):
    """Every candidate model reported itself unavailable."""

    def __init__(self, attempted: tuple[str, ...]) -> None:
        super().__init__(
            "No accessible Gemini model found for your API key/region.",
            {"attempted": list(attempted)},
        )
        self.attempted = attempted
        self.hint = NO_MODEL_HINT


class ExternalCallFailed(ExtractionError):
    """The Gemini call failed in a way that must not be retried."""

    def __init__(
        self,
        status_code: int,
        status_text: str,
        model: str | None = None,
    ) -> None:
        super().__init__(
            "LLM call failed",
            {"status": status_code, "status_text": status_text, "model": model},
        )
        self.status_code = status_code
        self.status_text = status_text
        self.model = model

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def hint(self) -> str:
        return RATE_LIMIT_HINT if self.rate_limited else ACCESS_HINT


class MalformedExternalResponse(ExtractionError):
    """Gemini replied, but the reply is not a valid structured result."""


class StorageFailure(ExtractionError):
    """Persisting a result failed. Logged by callers, never surfaced."""


class ExternalCallError(Exception):
    """Raised by a model call when the service answers with an error status."""

    def __init__(self, status_code: int, status_text: str) -> None:
        super().__init__(f"{status_code} {status_text}")
        self.status_code = status_code
        self.status_text = status_text
