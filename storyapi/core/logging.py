"""Logging setup for the story backend."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_LOGGER = "storyapi"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger (safe to call repeatedly)."""
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_storyapi_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._storyapi_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
