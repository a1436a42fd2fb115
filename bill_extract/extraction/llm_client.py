"""Gemini text generation call used by the candidate invoker.

Wraps ``google-genai`` so that every failure reaches the invoker as an
:class:`ExternalCallError` carrying an HTTP-style status code.
"""

import httpx
from google import genai
from google.genai import errors, types

from bill_extract.utils.config import LLMConfig
from bill_extract.utils.logger import get_logger

from .errors import ExternalCallError

logger = get_logger(__name__)


class GeminiTextModel:
    """Callable performing one ``generateContent`` request per invocation.

    The underlying client is created on first use so the service can start
    and answer health checks without credentials.

    Args:
        config: LLM configuration with the API key, temperature and timeout.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.config.api_key:
                raise ExternalCallError(401, "GOOGLE_API_KEY is not set")
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(
                    timeout=int(self.config.timeout_seconds * 1000)
                ),
            )
            logger.debug(
                "Gemini client initialized (timeout %.0fs)",
                self.config.timeout_seconds,
            )
        return self._client

    def __call__(self, prompt: str, model: str) -> str:
        """Send ``prompt`` to ``model`` and return the reply text.

        Raises:
            ExternalCallError: If the API answers with an error status, the
                request times out, or the connection fails.
        """
        client = self._get_client()
        config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            response_mime_type="application/json",
        )
        try:
            response = client.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except errors.APIError as exc:
            raise ExternalCallError(
                exc.code or 502, exc.status or exc.message or "LLM error"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ExternalCallError(504, "LLM request timed out") from exc
        except httpx.TransportError as exc:
            raise ExternalCallError(503, f"LLM connection failed: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ExternalCallError(502, f"LLM request failed: {exc}") from exc

        return response.text or ""
