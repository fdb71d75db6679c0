# camthumb/logging_setup.py
"""Logging helpers for camthumb."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "camthumb.stderr"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Safe to call more than once (e.g. one app per test); the handler is only added
    the first time, later calls just update the level.
    """
    logger = logging.getLogger("camthumb")

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
