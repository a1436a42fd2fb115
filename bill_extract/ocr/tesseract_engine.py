"""Tesseract OCR engine wrapper.

Provides plain-text extraction with an average word confidence and
configurable page segmentation modes.
"""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from bill_extract.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRResult:
    """OCR output for a single bill image."""

    text: str
    language: str
    confidence: float
    word_count: int


class TesseractEngine:
    """Wrapper around Tesseract OCR for bill text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang

    def extract_text(
        self,
        image: np.ndarray,
        lang: str | None = None,
        psm: int = 3,
    ) -> OCRResult:
        """Extract text from an image.

        Args:
            image: Input image as a numpy array.
            lang: OCR language code. Defaults to the engine default.
            psm: Tesseract page segmentation mode.

        Returns:
            OCRResult containing the full text and average confidence.
        """
        lang = lang or self.default_lang
        config = f"--psm {psm}"

        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(pil_image, lang=lang, config=config)

        data = pytesseract.image_to_data(
            pil_image,
            lang=lang,
            config=config,
            output_type=pytesseract.Output.DICT,
        )

        total_conf = 0.0
        word_count = 0
        for conf, word_text in zip(data["conf"], data["text"]):
            conf = float(conf)
            if conf > 0 and word_text.strip():
                total_conf += conf
                word_count += 1

        avg_conf = (total_conf / word_count / 100.0) if word_count > 0 else 0.0

        logger.info(
            "OCR extracted %d words with average confidence %.2f",
            word_count,
            avg_conf,
        )
        return OCRResult(
            text=text,
            language=lang,
            confidence=avg_conf,
            word_count=word_count,
        )
