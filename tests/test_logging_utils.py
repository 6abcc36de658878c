"""Tests for package logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from ds_redirect.logging_utils import PACKAGE_LOGGER_NAME, configure_logging


def test_configure_logging_writes_file_and_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "ds_redirect.log"
    logger = configure_logging(log_file)
    try:
        configure_logging(log_file)
        assert logger.name == PACKAGE_LOGGER_NAME
        assert len(logger.handlers) == 2

        logging.getLogger("ds_redirect.redirect").info("redirect.installed dataset_type=%s", "Tau")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "| INFO | ds_redirect.redirect | redirect.installed dataset_type=Tau" in content
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def test_configure_logging_console_only(tmp_path: Path) -> None:
    logger = configure_logging(level=logging.DEBUG)
    try:
        assert logger.level == logging.DEBUG
        assert [type(handler) for handler in logger.handlers] == [logging.StreamHandler]
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
