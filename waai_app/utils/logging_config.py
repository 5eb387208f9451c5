"""Logging configuration helpers for Waai Classroom."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure root logging for the console and API and return the app logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # the child page polls its session while answer feedback is shown
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return logging.getLogger("waai_app")
