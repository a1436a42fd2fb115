"""Shared test fixtures for the bill extraction test suite."""

import copy
import io
import json
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from bill_extract.extraction.errors import ExternalCallError
from bill_extract.extraction.invoker import CandidateInvoker
from bill_extract.extraction.orchestrator import ExtractionOrchestrator
from bill_extract.extraction.store import FileResultStore
from bill_extract.utils.config import LLMConfig

BILL_TEXT = "Total: $100 Paid: $60 Due: $40"

BILL_RESULT = {
    "currency": "USD",
    "amounts": [
        {"type": "total_bill", "value": 100, "source": "text: 'Total: $100'"},
        {"type": "paid", "value": 60, "source": "text: 'Paid: $60'"},
        {"type": "due", "value": 40, "source": "text: 'Due: $40'"},
    ],
    "status": "ok",
}


class StubRecognizer:
    """Recognizer returning fixed text and counting calls."""

    def __init__(self, text: str = BILL_TEXT, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, image_bytes: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


class StubModelCall:
    """Model call scripted per model identifier.

    Each entry maps a model to reply text, or to an exception to raise.
    Models missing from the script answer with a 404.
    """

    def __init__(self, script: dict[str, str | Exception]) -> None:
        self.script = script
        self.calls: list[tuple[str, str]] = []

    def __call__(self, prompt: str, model: str) -> str:
        self.calls.append((prompt, model))
        reply = self.script.get(model, ExternalCallError(404, "NOT_FOUND"))
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def models(self) -> list[str]:
        return [model for _, model in self.calls]


class RecordingStore(FileResultStore):
    """File store that counts lookups and writes."""

    def __init__(self, root: Path) -> None:
        super().__init__(root)
        self.lookups = 0
        self.puts = 0

    def lookup(self, fingerprint):
        self.lookups += 1
        return super().lookup(fingerprint)

    def put(self, fingerprint, raw_bytes, result):
        self.puts += 1
        super().put(fingerprint, raw_bytes, result)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials out of configuration tests."""
    for name in ("GOOGLE_API_KEY", "GEMINI_MODEL", "PORT", "UPLOAD_DIR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def bill_text() -> str:
    """OCR text of the sample bill."""
    return BILL_TEXT


@pytest.fixture
def bill_result() -> dict:
    """Expected structured result for the sample bill, in wire form."""
    return copy.deepcopy(BILL_RESULT)


@pytest.fixture
def bill_reply() -> str:
    """Model reply for the sample bill, as the model would send it."""
    return json.dumps(BILL_RESULT)


@pytest.fixture
def model_call() -> type[StubModelCall]:
    """Factory for scripted model calls: ``model_call({"model-a": reply})``."""
    return StubModelCall


@pytest.fixture
def stub_recognizer() -> type[StubRecognizer]:
    """Factory for recognizers returning fixed text or raising."""
    return StubRecognizer


@pytest.fixture
def png_bytes() -> bytes:
    """Encode a small synthetic bill image as PNG."""
    image = np.full((60, 120, 3), 255, dtype=np.uint8)
    image[20:40, 10:110] = 0
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(api_key="test-key", default_models=["model-a"])


@pytest.fixture
def store(tmp_path: Path) -> RecordingStore:
    return RecordingStore(tmp_path / "uploads")


@pytest.fixture
def make_orchestrator(store: RecordingStore, llm_config: LLMConfig):
    """Build an orchestrator around stub collaborators."""

    def _make(
        call: StubModelCall,
        recognizer: StubRecognizer | None = None,
        config: LLMConfig | None = None,
    ) -> ExtractionOrchestrator:
        return ExtractionOrchestrator(
            store=store,
            recognizer=recognizer or StubRecognizer(),
            invoker=CandidateInvoker(call),
            llm_config=config or llm_config,
        )

    return _make
