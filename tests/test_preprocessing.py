"""Tests for grayscale conversion and binarization."""

import numpy as np
import pytest

from bill_extract.preprocessing.binarize import (
    binarize_adaptive,
    binarize_otsu,
    binarize_threshold,
    prepare_for_ocr,
    to_gray,
)
from bill_extract.utils.config import PreprocessingConfig


def _make_gradient_image(height: int = 50, width: int = 256) -> np.ndarray:
    """Create a grayscale image whose columns run from 0 to 255."""
    row = np.arange(width, dtype=np.uint8)
    return np.tile(row, (height, 1))


def _make_color_image(height: int = 200, width: int = 300) -> np.ndarray:
    """Create a synthetic RGB image for testing."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[50:150, 50:250] = (200, 200, 200)
    return image


class TestToGray:
    """Tests for grayscale conversion."""

    def test_color_to_gray(self) -> None:
        result = to_gray(_make_color_image())
        assert result.ndim == 2
        assert result.shape == (200, 300)

    def test_rgba_to_gray(self) -> None:
        rgba = np.zeros((10, 10, 4), dtype=np.uint8)
        assert to_gray(rgba).shape == (10, 10)

    def test_gray_passthrough(self) -> None:
        gray = _make_gradient_image()
        assert to_gray(gray) is gray


class TestBinarize:
    """Tests for binarization functions."""

    def test_fixed_threshold_splits_at_cutoff(self) -> None:
        result = binarize_threshold(_make_gradient_image(), threshold=128)
        assert set(np.unique(result)) == {0, 255}
        assert result[0, 128] == 0
        assert result[0, 129] == 255

    def test_otsu_is_binary(self) -> None:
        result = binarize_otsu(_make_color_image())
        assert set(np.unique(result)).issubset({0, 255})

    def test_adaptive_is_binary(self) -> None:
        result = binarize_adaptive(_make_color_image())
        assert result.shape == (200, 300)
        assert set(np.unique(result)).issubset({0, 255})


class TestPrepareForOcr:
    """Tests for the configured preprocessing steps."""

    def test_default_is_fixed_threshold(self) -> None:
        image = _make_gradient_image()
        result = prepare_for_ocr(image, PreprocessingConfig())
        np.testing.assert_array_equal(result, binarize_threshold(image, 128))

    @pytest.mark.parametrize("method", ["otsu", "adaptive", "threshold"])
    def test_methods_produce_binary_output(self, method: str) -> None:
        config = PreprocessingConfig(binarize_method=method)
        result = prepare_for_ocr(_make_color_image(), config)
        assert result.ndim == 2
        assert set(np.unique(result)).issubset({0, 255})

    def test_grayscale_only(self) -> None:
        config = PreprocessingConfig(binarize_enabled=False)
        result = prepare_for_ocr(_make_color_image(), config)
        assert result.ndim == 2
        assert 200 in np.unique(result)

    def test_all_disabled_returns_input(self) -> None:
        image = _make_color_image()
        config = PreprocessingConfig(grayscale_enabled=False, binarize_enabled=False)
        assert prepare_for_ocr(image, config) is image
