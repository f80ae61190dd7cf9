"""Simple logging setup (single canonical logger)."""

import logging

from core.conf import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    level = level.upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))

    # Keep httpx request lines out of INFO unless asked for
    logging.getLogger("httpx").setLevel(logging.DEBUG if level == "DEBUG" else logging.WARNING)


configure_logging()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
