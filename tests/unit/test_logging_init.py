from __future__ import annotations

import io
import logging
from unittest.mock import patch

from payroll_summary.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_keeps_single_handler():
    a = setup_logging()
    b = setup_logging(debug=True)
    assert a is b
    assert a.name == LOGGER_NAME
    assert len(a.handlers) == 1
    assert a.propagate is False
    assert get_logger() is a


def test_labels(capsys):
    logger = setup_logging()
    logger.info("hello")
    logger.warning("careful")
    logger.error("boom")
    log_summary("files=0/0")
    out = capsys.readouterr().out.splitlines()
    assert out == ["INFO hello", "WARN careful", "ERROR boom", "SUMMARY files=0/0"]


def test_debug_level_follows_latest_call(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    setup_logging(debug=True)
    logger.debug("shown")
    setup_logging()
    logger.debug("hidden again")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out


def test_handler_follows_replaced_stdout():
    logger = setup_logging()
    buf = io.StringIO()
    with patch("sys.stdout", buf):
        logger.info("redirected")
    assert buf.getvalue() == "INFO redirected\n"


def test_module_loggers_share_handler(capsys):
    setup_logging()
    logging.getLogger("payroll_summary.services.session").warning("child")
    assert "WARN child" in capsys.readouterr().out


def test_summary_level_between_info_and_warning():
    assert logging.INFO < SUMMARY_LEVEL < logging.WARNING
