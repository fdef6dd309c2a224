"""Application configuration management."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Generation settings, read from the environment or ``.env``."""

    # Vendors
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_ORGANIZATION: Optional[str] = None

    # Cascade, fastest/cheapest first
    GENERATION_CASCADE: str = "gemini:gemini-2.0-flash,gemini:gemini-1.5-flash,gemini:gemini-flash-latest"
    SECONDARY_CANDIDATE: str = "openai:gpt-4o-mini"

    # Retry
    GENERATION_MAX_RETRIES: int = 2
    GENERATION_INITIAL_DELAY: float = 2.0  # seconds
    GENERATION_BACKOFF_MULTIPLIER: float = 2.0
    GENERATION_MAX_DELAY: float = 60.0

    # Timeouts (seconds)
    PROVIDER_TIMEOUT: float = 30.0
    GENERATION_DEADLINE: Optional[float] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
