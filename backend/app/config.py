"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None
    db_create_all: bool = False

    # Cache (rate limiter backend)
    redis_url: str | None = None

    # UI
    ui_origin: str = "http://localhost:8501"

    # Completion service
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4.1-nano"
    analysis_temperature: float = 0.3
    chat_temperature: float = 0.7
    llm_timeout_seconds: float = 60.0

    # Background jobs
    worker_concurrency: int = 4

    # Rate limiting (requests per minute)
    upload_ops_per_min: int = 10
    chat_ops_per_min: int = 30

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
