"""Logging configuration for the application."""
import logging
import sys
from typing import Optional

from mycerti.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    if settings.log_level:
        return logging.getLevelName(settings.log_level.upper())
    return logging.DEBUG if settings.environment == "development" else logging.INFO


def configure_logger(name: str = "mycerti", level: Optional[str] = None) -> logging.Logger:
    """
    Set up a stdout logger.

    Calling it again for the same name only changes the level.

    Args:
        name: Logger name
        level: Level name such as "WARNING"; defaults to LOG_LEVEL, then to
            DEBUG in development and INFO elsewhere

    Returns:
        The configured logger
    """
    resolved = logging.getLevelName(level.upper()) if level else _default_level()

    configured = logging.getLogger(name)
    configured.setLevel(resolved)

    if not configured.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        configured.addHandler(handler)

    # Handlers filter nothing; the logger level decides
    configured.propagate = False
    return configured


logger = configure_logger()

__all__ = ["logger", "configure_logger"]
