"""Logging for the CLI and the API server."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Client libraries that log each request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO", app_log_path: Path | None = None) -> None:
    """Log to stderr, and also to ``app_log_path`` when one is given.

    Replaces any handlers already on the root logger, so calling it again
    with a different level or file takes effect.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if app_log_path is not None:
        app_log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(app_log_path, encoding="utf-8"))

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(_level(log_level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
