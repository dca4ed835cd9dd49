from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OCR
    ocr_engine: str = "tesseract"
    ocr_lang: str = "eng"
    ocr_preprocess: bool = True
    ocr_debug_save: bool = False
    ocr_debug_dir: str = "/tmp/ocr-debug"

    # Amount extraction
    min_amount: int = 10_000
    max_amount: int = 50_000_000
    confidence_threshold: float = 80.0
    require_confirmation: bool = False

    # Tools
    tool_manager: str = "mock"  # only "mock" ships with the repo

    # Reply templates
    message_store: str = "local"
    templates_dir: str = "templates"
    message_language: str = "id"
    message_fallback_language: str = "id"

    # Opik
    opik_workspace: str | None = None
    opik_project: str = "order-intake"
    opik_api_key: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def for_eval(cls) -> "AppConfig":
        """Pre-configured for evaluation: mock tools, no debug output."""
        return cls(
            tool_manager="mock",
            ocr_debug_save=False,
            message_store="local",
            templates_dir="templates",
        )
