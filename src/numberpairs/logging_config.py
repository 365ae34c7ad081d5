"""
Logging Configuration
Sets up the 'numberpairs' logger for the application.

The level can be chosen without touching code through the NUMBERPAIRS_LOG_LEVEL
environment variable (e.g. NUMBERPAIRS_LOG_LEVEL=DEBUG to follow every drag step).
"""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "NUMBERPAIRS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.INFO


def level_from_env() -> int:
    """Level named by NUMBERPAIRS_LOG_LEVEL, or INFO when unset or unknown."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    return logging.getLevelNamesMapping().get(name, DEFAULT_LOG_LEVEL)


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'numberpairs' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). Defaults to the level named
            by NUMBERPAIRS_LOG_LEVEL.
        log_file: Optional path to save logs to a file.
    """
    if level is None:
        level = level_from_env()

    logger = logging.getLogger("numberpairs")
    logger.setLevel(level)

    # Re-running setup (tests, a second window) must not double every line
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
