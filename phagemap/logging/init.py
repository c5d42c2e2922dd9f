from __future__ import annotations

import logging
import sys

"""Application logging: `LABEL message` lines on stdout.

Labels: DEBUG, INFO, WARN, ERROR, CRITICAL and SUMMARY (custom level 25,
used once per import run). Library modules only call
logging.getLogger(__name__); their records reach the single stdout handler
installed here on the "phagemap" logger.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "phagemap"
SUMMARY_LEVEL = 25  # between INFO and WARNING

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}

_app_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return f"{_LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"


def _stdout_handler() -> logging.Handler:
    # bound to the sys.stdout current at setup time (pytest capsys swaps it per test)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    handler.setLevel(logging.INFO)
    return handler


def setup_logging() -> logging.Logger:
    """Install the stdout handler on the "phagemap" logger.

    Safe to call repeatedly: after the first call the same logger is
    returned untouched until reset_logging().
    """
    global _app_logger
    if _app_logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        app = logging.getLogger(LOGGER_NAME)
        app.handlers.clear()
        app.addHandler(_stdout_handler())
        app.setLevel(logging.INFO)
        # keep records off the root logger so nothing prints twice
        app.propagate = False
        _app_logger = app
    return _app_logger


def get_logger() -> logging.Logger:
    return _app_logger or setup_logging()


def set_debug(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() reinstalls it (tests)."""
    global _app_logger
    _app_logger = None
