"""Logging configuration."""

import sys

from loguru import logger

from statkit.settings import LOG_DIR, LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL, to_file: bool = False):
    """Configure stderr logging and, optionally, a daily rotated file.

    Cache hits/misses and registry events are logged at DEBUG, retries at
    WARNING.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{name}</cyan> | <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "statkit_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="00:00",
            retention="14 days",
            compression="gz",
        )
        logger.info("Statistics log file in {}", LOG_DIR)

    return logger
