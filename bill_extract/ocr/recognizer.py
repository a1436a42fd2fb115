"""Recognized text from uploaded image bytes.

Decodes the upload with Pillow, flattens it for OCR, and runs Tesseract.
Any failure along the way is reported as :class:`RecognitionFailed`.
"""

import io
from typing import Protocol

import numpy as np
import pytesseract
from PIL import Image, UnidentifiedImageError

from bill_extract.extraction.errors import RecognitionFailed
from bill_extract.preprocessing.binarize import prepare_for_ocr
from bill_extract.utils.config import AppConfig
from bill_extract.utils.logger import get_logger

from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


class TextRecognizer(Protocol):
    def recognize(self, image_bytes: bytes) -> str: ...


def decode_image(image_bytes: bytes) -> np.ndarray:
    """Decode image bytes into an RGB or grayscale numpy array.

    Raises:
        RecognitionFailed: If the bytes are not a readable image.
    """
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise RecognitionFailed(
            "Failed to process image.", {"error": str(exc)}
        ) from exc

    if img.mode != "L":
        img = img.convert("RGB")
    return np.array(img)


class BillTextRecognizer:
    """Preprocessing plus Tesseract, configured from :class:`AppConfig`.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
        )

    def recognize(self, image_bytes: bytes) -> str:
        """Return the text Tesseract reads from ``image_bytes``.

        Raises:
            RecognitionFailed: If decoding or OCR fails.
        """
        image = decode_image(image_bytes)
        processed = prepare_for_ocr(image, self.config.preprocessing)
        try:
            result = self.ocr_engine.extract_text(processed, psm=self.config.ocr.psm)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            logger.error("Tesseract failed: %s", exc)
            raise RecognitionFailed(
                "Failed to process image.", {"error": str(exc)}
            ) from exc
        return result.text
