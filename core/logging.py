"""
Logging setup for the API process.

Uses the standard library logging module with a compact, human-readable
formatter on stdout. Call setup_logging() once at startup; modules get their
logger with get_logger(__name__).
"""

import logging
import sys

from core.settings import get_settings


class ConsoleFormatter(logging.Formatter):
    """Single-line formatter: time, level, logger name, message."""

    def __init__(self) -> None:
        super().__init__(fmt="[%(asctime)s] %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")


def setup_logging() -> None:
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(ConsoleFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
