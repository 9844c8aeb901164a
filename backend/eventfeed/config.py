"""Application configuration via environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite+aiosqlite:///./eventfeed.db"
    CORS_ORIGINS: str = "http://localhost:19006"

    # Calendar days are cut in this IANA zone
    CALENDAR_TIMEZONE: str = "UTC"

    RECOMMENDATION_LIMIT: int = 10
    FAVORITE_WEIGHT: int = 10

    # When true, favorites read failures log and return [] instead of raising
    FAVORITES_LENIENT_READS: bool = False

    REPOSITORY_TIMEOUT_SECONDS: float = 10.0

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
