"""Tests for repolens.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from repolens.logging import configure_logging, get_logger, reset_logging


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger().name == "repolens"
    assert get_logger("scanner").name == "repolens.scanner"


def test_configure_logging_sets_level_and_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_configure_logging_appends_to_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "run.log"
    configure_logging(log_file=log_file)

    get_logger("engine").info("hello %s", "file")
    get_logger("engine").debug("hidden")

    text = log_file.read_text(encoding="utf-8")
    assert "INFO repolens.engine: hello file" in text
    assert "hidden" not in text


def test_reset_logging_restores_propagation() -> None:
    configure_logging(verbose=True)

    logger = reset_logging()

    assert logger.handlers == []
    assert logger.propagate is True
    assert logger.level == logging.NOTSET
