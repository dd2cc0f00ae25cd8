"""Tests for logging setup."""

from __future__ import annotations

import logging

from quiz_engine.utils.logging_config import configure_logging


def test_returns_engine_logger():
    logger = configure_logging(logging.DEBUG)
    assert logger.name == "quiz_engine"


def test_module_loggers_propagate_to_engine_logger(caplog):
    configure_logging()
    with caplog.at_level(logging.INFO, logger="quiz_engine"):
        logging.getLogger("quiz_engine.core.scoring").info("scored")
    assert "scored" in caplog.text
