"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

_PACKAGE_DIR = Path(__file__).parent
_ASSETS_DIR = _PACKAGE_DIR / "assets"


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    roastbot_env: str = "development"
    roastbot_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Model routing
    model_text: str = "claude-haiku-4-5-20251001"
    model_vision: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 1000
    llm_temperature: float = 0.9

    # Rendering
    assets_dir: Path = _ASSETS_DIR
    templates_dir: Path = _ASSETS_DIR / "meme-templates"
    custom_templates_dir: Path = _ASSETS_DIR / "meme-templates" / "custom"
    font_path: Path = _ASSETS_DIR / "fonts" / "Poppins-Bold.ttf"
    watermark_text: str = "RoastBot.app"

    # Result cache
    cache_max_entries: int = 100
    cache_ttl_seconds: float = 60 * 60
    cache_image_prefix_chars: int = 50

    # Retry policy (image load, encode, LLM calls)
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_backoff_multiplier: float = 1.5

    # Analytics
    analytics_backend: str = "memory"  # "memory" | "jsonl"
    analytics_data_dir: Path = _PACKAGE_DIR / "analytics" / "data"
    viral_threshold: int = 100

    # Uploads
    max_upload_mb: float = 5.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
