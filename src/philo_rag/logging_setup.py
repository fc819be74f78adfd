"""Process-wide logging configuration."""

from __future__ import annotations

import logging
import sys

from philo_rag.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Send log records to stdout at the configured level.

    Safe to call more than once; existing root handlers are left alone so
    that uvicorn's or pytest's own handlers keep working.
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
