"""Tests for logging configuration."""

import logging

from civic_reporter.app_logging import configure_logging


def test_configure_logging_adds_single_handler() -> None:
    logger = logging.getLogger("civic_reporter")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert not logger.propagate


def test_configure_logging_applies_named_level() -> None:
    logger = logging.getLogger("civic_reporter")

    configure_logging("debug")
    assert logger.level == logging.DEBUG

    configure_logging(logging.WARNING)
    assert logger.level == logging.WARNING
    configure_logging()
