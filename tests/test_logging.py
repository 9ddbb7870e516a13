"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from companion.core.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_writes_app_log(restore_root_logger, tmp_path: Path):
    log_path = tmp_path / "logs" / "app.log"

    setup_logging("debug", log_path)
    logging.getLogger("companion.test").debug("hello from the store")

    for handler in restore_root_logger.handlers:
        handler.flush()
    assert restore_root_logger.level == logging.DEBUG
    assert "DEBUG companion.test hello from the store" in log_path.read_text(encoding="utf-8")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_replaces_previous_handlers(restore_root_logger, tmp_path: Path):
    setup_logging("INFO", tmp_path / "first.log")
    setup_logging("WARNING")

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty")
    assert restore_root_logger.level == logging.INFO
