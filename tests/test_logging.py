"""Tests for formulint logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from formulint.logging import configure_logging, get_logger


def test_get_logger_is_namespaced() -> None:
    assert get_logger("checker").name == "formulint.checker"
    assert get_logger().name == "formulint"


def test_configure_logging_levels() -> None:
    assert configure_logging().handlers[0].level == logging.INFO
    assert configure_logging(quiet=True).handlers[0].level == logging.WARNING
    assert configure_logging(verbose=True, quiet=True).handlers[0].level == logging.DEBUG


def test_configure_logging_does_not_stack_handlers() -> None:
    configure_logging()
    logger = configure_logging()

    assert len(logger.handlers) == 1


def test_log_file_receives_debug_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "formulint.log"
    logger = configure_logging(log_file=log_file)

    get_logger("checker").debug("scanned %d files", 3)
    for handler in logger.handlers:
        handler.flush()

    assert "formulint.checker: scanned 3 files" in log_file.read_text(encoding="utf-8")
    configure_logging()
