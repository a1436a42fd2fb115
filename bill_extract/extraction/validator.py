"""Parsing and structural validation of Gemini replies.

The model is asked for bare JSON but is free text underneath: replies may
be wrapped in Markdown fences or surrounded by a sentence of prose. Only a
payload that validates as :class:`StructuredResult` leaves this module.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from bill_extract.utils.logger import get_logger

from .errors import MalformedExternalResponse
from .models import StructuredResult

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?")
_LOG_PREVIEW_CHARS = 500


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences and surrounding whitespace."""
    return _FENCE_PATTERN.sub("", text).strip()


def _parse_json(text: str) -> Any:
    """Parse ``text`` as JSON, falling back to its outermost object span."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise
        return json.loads(text[start : end + 1])


class ResponseValidator:
    """Turns raw reply text into a validated :class:`StructuredResult`."""

    def validate(self, raw_text: str) -> StructuredResult:
        """Parse and validate a reply.

        Args:
            raw_text: Text returned by the model.

        Returns:
            The validated structured result.

        Raises:
            MalformedExternalResponse: If the reply is not valid JSON or
                does not match the result schema.
        """
        cleaned = strip_code_fences(raw_text or "")
        if not cleaned:
            raise MalformedExternalResponse("The AI returned an empty response.")

        try:
            data = _parse_json(cleaned)
        except json.JSONDecodeError as exc:
            logger.error(
                "Failed to parse LLM response as JSON: %s",
                cleaned[:_LOG_PREVIEW_CHARS],
            )
            raise MalformedExternalResponse(
                "The AI returned an invalid format.", {"error": str(exc)}
            ) from exc

        try:
            return StructuredResult.model_validate(data)
        except ValidationError as exc:
            logger.error(
                "LLM response failed schema validation: %s",
                cleaned[:_LOG_PREVIEW_CHARS],
            )
            raise MalformedExternalResponse(
                "The AI returned an invalid format.",
                {"errors": exc.errors(
                    include_url=False, include_context=False, include_input=False
                )},
            ) from exc
