"""Tests for livedoc.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from livedoc.logging import configure_logging, get_logger


def test_get_logger_is_namespaced() -> None:
    assert get_logger("orchestrator").name == "livedoc.orchestrator"
    assert get_logger().name == "livedoc"


def test_configure_logging_levels_and_handler_reset() -> None:
    logger = configure_logging(verbose=True)
    configure_logging(verbose=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    assert configure_logging(quiet=True).level == logging.WARNING
    assert configure_logging(verbose=True, quiet=True).level == logging.DEBUG
    assert configure_logging().level == logging.INFO


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "livedoc.log"
    logger = configure_logging(log_file=log_file)

    get_logger("tests").info("hello from livedoc")
    for handler in logger.handlers:
        handler.flush()

    assert "hello from livedoc" in log_file.read_text(encoding="utf-8")
    configure_logging()
