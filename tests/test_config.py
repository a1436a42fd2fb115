"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from bill_extract.utils.config import (
    DEFAULT_MODELS,
    AppConfig,
    LLMConfig,
    OCRConfig,
    PreprocessingConfig,
    StorageConfig,
    apply_env_overrides,
    load_config,
)


class TestPreprocessingConfig:
    """Tests for PreprocessingConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = PreprocessingConfig()
        assert cfg.grayscale_enabled is True
        assert cfg.binarize_enabled is True
        assert cfg.binarize_method == "threshold"
        assert cfg.threshold == 128

    def test_threshold_bounds(self) -> None:
        with pytest.raises(ValidationError):
            PreprocessingConfig(threshold=300)


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.default_lang == "eng"
        assert cfg.psm == 3
        assert cfg.tesseract_cmd is None


class TestLLMConfig:
    """Tests for LLMConfig defaults and validation."""

    def test_defaults(self) -> None:
        cfg = LLMConfig()
        assert cfg.api_key is None
        assert cfg.model_override is None
        assert cfg.default_models == DEFAULT_MODELS
        assert cfg.default_currency == "INR"
        assert cfg.timeout_seconds == 60.0

    def test_default_models_not_shared(self) -> None:
        first = LLMConfig()
        first.default_models.append("extra")
        assert LLMConfig().default_models == DEFAULT_MODELS

    def test_empty_model_list_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LLMConfig(default_models=["", "  "])

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LLMConfig(timeout_seconds=0)


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.preprocessing, PreprocessingConfig)
        assert isinstance(cfg.ocr, OCRConfig)
        assert isinstance(cfg.llm, LLMConfig)
        assert isinstance(cfg.storage, StorageConfig)
        assert cfg.storage.upload_dir == "uploads"
        assert cfg.log_level == "INFO"
        assert cfg.port == 3000


class TestEnvOverrides:
    """Tests for apply_env_overrides."""

    def test_no_env_returns_same_config(self) -> None:
        cfg = AppConfig()
        assert apply_env_overrides(cfg) is cfg

    def test_env_values_applied(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_API_KEY", "secret")
        monkeypatch.setenv("GEMINI_MODEL", " gemini-2.0-flash ")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("UPLOAD_DIR", "/tmp/bills")

        cfg = apply_env_overrides(AppConfig())
        assert cfg.llm.api_key == "secret"
        assert cfg.llm.model_override == "gemini-2.0-flash"
        assert cfg.llm.default_models == DEFAULT_MODELS
        assert cfg.port == 8080
        assert cfg.storage.upload_dir == "/tmp/bills"

    def test_empty_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_MODEL", "")
        assert apply_env_overrides(AppConfig()).llm.model_override is None


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_default_config(self) -> None:
        cfg = load_config(Path("configs/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"
        assert cfg.llm.default_models[0] == "gemini-1.5-flash-8b"

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "preprocessing": {"binarize_method": "otsu"},
            "llm": {"default_models": ["m1"], "default_currency": "USD"},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.preprocessing.binarize_method == "otsu"
        assert cfg.llm.default_models == ["m1"]
        assert cfg.llm.default_currency == "USD"
        assert cfg.log_level == "DEBUG"

    def test_env_overrides_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("llm:\n  model_override: from-yaml\n")
        monkeypatch.setenv("GEMINI_MODEL", "from-env")
        assert load_config(config_file).llm.model_override == "from-env"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)
