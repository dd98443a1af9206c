"""Logging configuration module with optional file output."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from lexigraph.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_DETAILED = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)

# Chatty third-party loggers kept at WARNING unless we are debugging
_NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "sqlalchemy.engine")


def setup_logging() -> None:
    """Configure application logging based on settings.

    Console logging always goes to stdout. File logging is added when
    ``log_file_enabled`` is set and rotates by size.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Remove existing handlers to avoid duplicates on repeated setup
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if settings.log_file_enabled:
        log_path = settings.resolved_log_file_path
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_DETAILED))
        root_logger.addHandler(file_handler)

    if settings.log_level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
