"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

from splitdiff.logging import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_default_is_silent(self):
        logger = setup_logging()
        assert logger.level == logging.WARNING
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert logger.propagate is False

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "splitdiff.log"
        setup_logging("debug", log_file)
        get_logger("splitdiff.diff.parser").debug("parsed %d files", 2)

        assert "parsed 2 files" in log_file.read_text(encoding="utf-8")

    def test_repeated_setup_replaces_handler(self, tmp_path):
        setup_logging("INFO", tmp_path / "one.log")
        logger = setup_logging("INFO")
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back(self):
        assert setup_logging("LOUD").level == logging.WARNING
