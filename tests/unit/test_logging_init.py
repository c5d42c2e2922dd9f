from __future__ import annotations

import logging
from io import StringIO

from phagemap.logging.init import (
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_debug,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "phagemap"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert get_logger() is setup_logging()
    assert len(logging.getLogger("phagemap").handlers) == 1


def test_labeled_prefixes():
    stream = StringIO()
    logger = logging.getLogger("test_phagemap_labels")
    logger.handlers.clear()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    logger.info("info message")
    logger.warning("warn message")
    logger.error("error message")
    logger.log(SUMMARY_LEVEL, "files=1")

    lines = stream.getvalue().splitlines()
    assert lines == ["INFO info message", "WARN warn message", "ERROR error message", "SUMMARY files=1"]


def test_child_module_loggers_reach_app_handler(capsys):
    setup_logging()
    logging.getLogger("phagemap.services.parser").info("from a module")
    assert "INFO from a module" in capsys.readouterr().out


def test_log_summary_and_debug(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    set_debug(logger)
    logger.debug("shown")
    log_summary("files=0")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out
    assert "SUMMARY files=0" in out
