"""Grayscale conversion and binarization for bill images.

Flattens photographed or scanned bills to black text on a white
background before OCR: fixed-threshold, Otsu and adaptive variants.
"""

import cv2
import numpy as np

from bill_extract.utils.config import PreprocessingConfig
from bill_extract.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an image to grayscale if it has color channels.

    Args:
        image: Input image (RGB, RGBA or grayscale).

    Returns:
        Grayscale image.
    """
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    return image


def binarize_threshold(image: np.ndarray, threshold: int = 128) -> np.ndarray:
    """Binarize an image with a fixed global threshold.

    Pixels strictly above ``threshold`` become white, the rest black.

    Args:
        image: Input image (color or grayscale).
        threshold: Intensity cut-off in the range 0-255.

    Returns:
        Binary image with pixel values 0 or 255.
    """
    gray = to_gray(image)
    _, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)
    logger.debug("Applied fixed threshold binarization (threshold=%d)", threshold)
    return binary


def binarize_otsu(image: np.ndarray) -> np.ndarray:
    """Binarize an image using Otsu's automatic thresholding.

    Args:
        image: Input image (color or grayscale).

    Returns:
        Binary image with pixel values 0 or 255.
    """
    gray = to_gray(image)
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    logger.debug("Applied Otsu binarization")
    return binary


def binarize_adaptive(
    image: np.ndarray, block_size: int = 11, c: int = 2
) -> np.ndarray:
    """Binarize an image using adaptive Gaussian thresholding.

    Args:
        image: Input image (color or grayscale).
        block_size: Size of the pixel neighborhood for threshold calculation.
        c: Constant subtracted from the mean.

    Returns:
        Binary image with pixel values 0 or 255.
    """
    gray = to_gray(image)
    result = cv2.adaptiveThreshold(
        gray,
        255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY,
        block_size,
        c,
    )
    logger.debug("Applied adaptive binarization (block=%d, c=%d)", block_size, c)
    return result


def prepare_for_ocr(image: np.ndarray, config: PreprocessingConfig) -> np.ndarray:
    """Apply the configured grayscale and binarization steps.

    Args:
        image: Decoded bill image.
        config: Preprocessing configuration controlling which steps to apply.

    Returns:
        Image ready for Tesseract.
    """
    result = image
    if config.grayscale_enabled:
        result = to_gray(result)

    if config.binarize_enabled:
        if config.binarize_method == "otsu":
            result = binarize_otsu(result)
        elif config.binarize_method == "adaptive":
            result = binarize_adaptive(result)
        else:
            result = binarize_threshold(result, config.threshold)

    return result
