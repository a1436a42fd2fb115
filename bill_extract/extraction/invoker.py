"""Ordered fallback across Gemini model identifiers.

The set of models an API key can address depends on account and region,
so a request tries a short list of known identifiers in order. A model
that reports "not found" is skipped; any other failure, rate limiting
included, ends the attempt immediately.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from bill_extract.utils.logger import get_logger

from .errors import ExternalCallError

logger = get_logger(__name__)

ModelCall = Callable[[str, str], str]

NOT_FOUND = 404
RATE_LIMITED = 429
UNEXPECTED_FAILURE = 502


class CandidateAction(Enum):
    """What to do after a candidate failed."""

    ADVANCE = "advance"
    STOP_FATAL = "stop_fatal"


def classify_failure(status_code: int) -> CandidateAction:
    """Map an external status code to the fallback decision."""
    if status_code == NOT_FOUND:
        return CandidateAction.ADVANCE
    return CandidateAction.STOP_FATAL


@dataclass(frozen=True)
class Success:
    text: str
    model: str
    attempted: tuple[str, ...]


@dataclass(frozen=True)
class RetryableFailure:
    """No candidate succeeded; every one of them was unavailable."""

    reason: str
    attempted: tuple[str, ...]


@dataclass(frozen=True)
class FatalFailure:
    status_code: int
    reason: str
    model: str
    attempted: tuple[str, ...]

    @property
    def rate_limited(self) -> bool:
        return self.status_code == RATE_LIMITED


InvocationOutcome = Success | RetryableFailure | FatalFailure


def build_candidates(override: str | None, defaults: Iterable[str]) -> tuple[str, ...]:
    """Build the ordered candidate list for one request.

    The override, when given, comes first. Blank and repeated identifiers
    are dropped so each model is attempted at most once.

    Args:
        override: Model identifier that takes priority, if configured.
        defaults: Fallback identifiers in preference order.

    Returns:
        Ordered tuple of unique model identifiers.
    """
    ordered: list[str] = []
    for name in [override, *defaults]:
        name = (name or "").strip()
        if name and name not in ordered:
            ordered.append(name)
    return tuple(ordered)


class CandidateInvoker:
    """Runs a prompt against candidate models until one answers.

    Args:
        call: Function performing the external call as ``call(prompt, model)``.
            It returns the reply text or raises :class:`ExternalCallError`.
            Any other exception it raises is treated as a fatal failure.
    """

    def __init__(self, call: ModelCall) -> None:
        self.call = call

    def invoke(self, prompt: str, candidates: Sequence[str]) -> InvocationOutcome:
        """Try ``candidates`` in order with the given prompt.

        Args:
            prompt: Full prompt text.
            candidates: Non-empty ordered model identifiers. Repeats are
                attempted only once.

        Returns:
            ``Success`` with the reply and the model that produced it,
            ``FatalFailure`` for a non-retryable error, or
            ``RetryableFailure`` when every candidate was unavailable.
        """
        candidates = tuple(dict.fromkeys(candidates))
        if not candidates:
            raise ValueError("candidates must not be empty")

        attempted: list[str] = []
        for model in candidates:
            attempted.append(model)
            try:
                text = self.call(prompt, model)
            except ExternalCallError as exc:
                logger.warning(
                    "LLM call failed for model %s: %d %s",
                    model,
                    exc.status_code,
                    exc.status_text,
                )
                if classify_failure(exc.status_code) is CandidateAction.ADVANCE:
                    continue
                return FatalFailure(
                    status_code=exc.status_code,
                    reason=exc.status_text,
                    model=model,
                    attempted=tuple(attempted),
                )
            except Exception as exc:
                logger.error("LLM call raised for model %s: %s", model, exc)
                return FatalFailure(
                    status_code=UNEXPECTED_FAILURE,
                    reason=str(exc) or type(exc).__name__,
                    model=model,
                    attempted=tuple(attempted),
                )

            logger.info("Gemini generateContent succeeded with model: %s", model)
            return Success(text=text, model=model, attempted=tuple(attempted))

        return RetryableFailure(
            reason=f"no candidate succeeded ({len(attempted)} tried)",
            attempted=tuple(attempted),
        )
