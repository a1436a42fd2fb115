"""Configuration management for the bill amount extraction service.

Loads and validates YAML configuration with sensible defaults for
preprocessing, OCR, the Gemini model list, and the result store, then
applies environment overrides for credentials and deployment settings.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MODELS: list[str] = [
    "gemini-1.5-flash-8b",
    "gemini-1.5-flash-8b-latest",
    "gemini-1.5-pro",
    "gemini-1.5-pro-latest",
]


class PreprocessingConfig(BaseModel):
    """Configuration for image preprocessing before OCR."""

    grayscale_enabled: bool = True
    binarize_enabled: bool = True
    binarize_method: str = "threshold"
    threshold: int = Field(default=128, ge=0, le=255)


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3


class LLMConfig(BaseModel):
    """Configuration for the Gemini text-understanding call."""

    api_key: str | None = None
    model_override: str | None = None
    default_models: list[str] = Field(default_factory=lambda: list(DEFAULT_MODELS))
    default_currency: str = "INR"
    temperature: float = 0.0
    timeout_seconds: float = Field(default=60.0, gt=0)

    @field_validator("default_models")
    @classmethod
    def _require_models(cls, value: list[str]) -> list[str]:
        models = [m.strip() for m in value if m and m.strip()]
        if not models:
            raise ValueError("default_models must name at least one model")
        return models


class StorageConfig(BaseModel):
    """Configuration for the content-addressed result store."""

    upload_dir: str = "uploads"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


def apply_env_overrides(config: AppConfig) -> AppConfig:
    """Overlay settings taken from environment variables.

    ``GOOGLE_API_KEY``, ``GEMINI_MODEL``, ``PORT`` and ``UPLOAD_DIR`` take
    priority over the YAML values when set and non-empty.

    Args:
        config: Configuration loaded from YAML or defaults.

    Returns:
        A new configuration with the overrides applied.
    """
    llm_updates: dict[str, object] = {}
    if os.environ.get("GOOGLE_API_KEY"):
        llm_updates["api_key"] = os.environ["GOOGLE_API_KEY"]
    if os.environ.get("GEMINI_MODEL"):
        llm_updates["model_override"] = os.environ["GEMINI_MODEL"].strip()

    updates: dict[str, object] = {}
    if llm_updates:
        updates["llm"] = config.llm.model_copy(update=llm_updates)
    if os.environ.get("UPLOAD_DIR"):
        updates["storage"] = config.storage.model_copy(
            update={"upload_dir": os.environ["UPLOAD_DIR"]}
        )
    if os.environ.get("PORT"):
        updates["port"] = int(os.environ["PORT"])

    return config.model_copy(update=updates) if updates else config


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration with environment overrides.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        config = AppConfig(**raw)
    else:
        logger.info("No config file found at %s, using defaults", path)
        config = AppConfig()

    return apply_env_overrides(config)
