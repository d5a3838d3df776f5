"""
Loguru sink configuration.
"""

import sys

from loguru import logger

from forumhub.core.config import settings


def setup_logging() -> None:
    """Replace the default sink with one at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        backtrace=settings.debug,
        diagnose=settings.debug,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
    )
