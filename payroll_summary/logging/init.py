from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Logging initialization with labeled prefixes.

Every line written by the CLI starts with one of INFO|WARN|ERROR|SUMMARY so that
wrapper scripts can grep the run outcome. One stdout handler sits on the package
logger; module loggers (``payroll_summary.services.*``) propagate to it.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
]

LOGGER_NAME = "payroll_summary"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25


class LabeledFormatter(logging.Formatter):
    """``LABEL message`` lines; WARNING is shortened to WARN."""

    LEVEL_LABELS = {
        logging.WARNING: "WARN",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


class _StdoutHandler(logging.StreamHandler):
    """Writes to the current ``sys.stdout``, even after it has been swapped."""

    @property
    def stream(self) -> TextIO:
        return sys.stdout

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach the labeled stdout handler to the package logger.

    Repeated calls keep a single handler; the level follows the latest call
    (DEBUG with ``debug``, INFO otherwise).
    """
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, _StdoutHandler) for h in logger.handlers):
        handler = _StdoutHandler()
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    # root に流すと二重出力になる
    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logging()
    return logger


def log_summary(message: str) -> None:
    """Log ``message`` at SUMMARY level (the label is added by the formatter)."""
    get_logger().log(SUMMARY_LEVEL, message)
