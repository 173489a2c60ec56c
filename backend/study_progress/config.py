"""
Configuration settings for the study progress engine.
All environment variables and tuning knobs are centralized here.
"""
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Study Assistant Progress Engine"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Azure Cosmos DB
    COSMOS_DB_ENDPOINT: Optional[str] = None
    COSMOS_DB_KEY: Optional[str] = None
    COSMOS_DB_DATABASE_NAME: str = "study_assistant_db"
    COSMOS_DB_TIMEOUT_SECONDS: int = 10
    # Container names
    COSMOS_DB_PROGRESS_CONTAINER: str = "progress"
    COSMOS_DB_FLASHCARDS_CONTAINER: str = "flashcards"

    # Progress record limits
    RECENT_SESSIONS_LIMIT: int = 50
    WEEKLY_PROGRESS_LIMIT: int = 12
    PROGRESS_SAVE_MAX_ATTEMPTS: int = 3  # optimistic concurrency attempts per session

    # Analytics views
    ANALYTICS_RECENT_ACTIVITY_LIMIT: int = 10
    ANALYTICS_TOP_TOPICS_LIMIT: int = 5
    ANALYTICS_WEEKLY_PROGRESS_LIMIT: int = 8
    ANALYTICS_PERIOD_DAYS: dict[str, int] = {
        "week": 7,
        "month": 30,
        "year": 365
    }

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Singleton instance
settings = get_settings()
