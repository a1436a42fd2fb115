"""End-to-end amount extraction for one uploaded bill image.

fingerprint -> cache lookup -> (miss) OCR -> Gemini -> validation ->
persist -> return. A cache hit skips every later step. Retries happen
only inside :class:`CandidateInvoker`, across models, never across the
whole pipeline.
"""

from bill_extract.ocr.recognizer import BillTextRecognizer, TextRecognizer
from bill_extract.utils.config import AppConfig, LLMConfig
from bill_extract.utils.logger import get_logger

from .errors import (
    ExtractionError,
    ExternalCallFailed,
    NoAccessibleModel,
    NoInput,
    RecognitionFailed,
    StorageFailure,
)
from .fingerprint import compute_fingerprint
from .invoker import CandidateInvoker, FatalFailure, RetryableFailure, build_candidates
from .llm_client import GeminiTextModel
from .models import StructuredResult
from .prompts import build_extraction_prompt
from .store import FileResultStore, ResultStore
from .validator import ResponseValidator

logger = get_logger(__name__)


class ExtractionOrchestrator:
    """Composes the store, OCR, model invocation and validation.

    Args:
        store: Content-addressed result store.
        recognizer: OCR collaborator turning image bytes into text.
        invoker: Candidate invoker wrapping the Gemini call.
        llm_config: Model override, default model list and default currency.
        validator: Reply validator. A fresh one is used if omitted.
    """

    def __init__(
        self,
        store: ResultStore,
        recognizer: TextRecognizer,
        invoker: CandidateInvoker,
        llm_config: LLMConfig,
        validator: ResponseValidator | None = None,
    ) -> None:
        self.store = store
        self.recognizer = recognizer
        self.invoker = invoker
        self.llm_config = llm_config
        self.validator = validator or ResponseValidator()

    def process(self, image_bytes: bytes) -> StructuredResult:
        """Extract monetary amounts from an uploaded image.

        Args:
            image_bytes: Raw upload content.

        Returns:
            The validated structured result, from cache when available.

        Raises:
            NoInput: If ``image_bytes`` is empty.
            RecognitionFailed: If OCR fails.
            ExternalCallFailed: If the Gemini call fails non-retryably.
            NoAccessibleModel: If no candidate model was available.
            MalformedExternalResponse: If the reply fails validation.
        """
        if not image_bytes:
            raise NoInput()

        fingerprint = compute_fingerprint(image_bytes)
        cached = self.store.lookup(fingerprint)
        if cached is not None:
            logger.info("Returning cached JSON result for %s", fingerprint)
            return cached

        logger.info("Processing new image %s", fingerprint)
        text = self._recognize(image_bytes)

        prompt = build_extraction_prompt(text, self.llm_config.default_currency)
        candidates = build_candidates(
            self.llm_config.model_override, self.llm_config.default_models
        )
        outcome = self.invoker.invoke(prompt, candidates)

        if isinstance(outcome, FatalFailure):
            raise ExternalCallFailed(outcome.status_code, outcome.reason, outcome.model)
        if isinstance(outcome, RetryableFailure):
            logger.error(
                "No accessible Gemini model among %s", ", ".join(outcome.attempted)
            )
            raise NoAccessibleModel(outcome.attempted)

        result = self.validator.validate(outcome.text)

        try:
            self.store.put(fingerprint, image_bytes, result)
        except StorageFailure as exc:
            logger.warning("Result not cached: %s", exc)

        return result

    def _recognize(self, image_bytes: bytes) -> str:
        try:
            return self.recognizer.recognize(image_bytes)
        except ExtractionError:
            raise
        except Exception as exc:
            raise RecognitionFailed(
                "Failed to process image.", {"error": str(exc)}
            ) from exc


def build_orchestrator(config: AppConfig) -> ExtractionOrchestrator:
    """Wire the production collaborators from application configuration.

    Args:
        config: Application configuration object.

    Returns:
        Orchestrator using the file store, Tesseract and Gemini.
    """
    return ExtractionOrchestrator(
        store=FileResultStore(config.storage.upload_dir),
        recognizer=BillTextRecognizer(config),
        invoker=CandidateInvoker(GeminiTextModel(config.llm)),
        llm_config=config.llm,
    )
