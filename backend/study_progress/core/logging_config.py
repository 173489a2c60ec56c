"""
Logging setup.
Applies the configured level and format to the root logger.
"""
import logging

from study_progress.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings (LOG_LEVEL, LOG_FORMAT)."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT
    )
    logging.getLogger(__name__).info(
        f"Logging configured for {settings.APP_NAME} v{settings.APP_VERSION} "
        f"({settings.ENVIRONMENT})"
    )
