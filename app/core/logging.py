"""Logging configuration for the API server and scripts.

Level comes from the LOG_LEVEL setting. Default: INFO.
"""

import logging
import sys

from app.core.config import settings

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name to a logging constant, falling back to INFO."""
    level_str = (level_name or settings.LOG_LEVEL).upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def setup_logging(level_name: str | None = None) -> None:
    """Configure the root logger to write to stdout.

    Existing handlers are replaced so repeated calls (reloads, tests)
    do not duplicate output.
    """
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)
