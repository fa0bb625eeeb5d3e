"""
Logging configuration for the application
"""
import logging
import logging.config

from src.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """
    Configure root logging once at startup

    Module code only ever calls ``logging.getLogger(__name__)``; handlers and
    levels are decided here.
    """
    log_level = (level or settings.LOG_LEVEL).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": log_level},
            "loggers": {
                # SQL echo is controlled by the engine, not the log level
                "sqlalchemy.engine": {"level": "WARNING"},
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )
