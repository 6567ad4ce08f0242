"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./contracts.db"

    # Chunking (characters)
    chunk_size: int = 1000
    chunk_threshold: int = 1000

    # Search stage caps
    search_document_limit: int = 10
    search_chunk_limit: int = 15
    search_fallback_limit: int = 5

    # Ingestion defaults
    default_risk_score: str = "Low"

    # Presentation
    excerpt_max_chars: int = 300

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
