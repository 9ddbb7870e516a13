"""App startup/shutdown lifecycle events."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from companion.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = app.state.settings
    setup_logging(settings.log_level, settings.app_log_path)
    logger.info("Companion API starting up (data dir: %s)", settings.data_dir)

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    yield

    logger.info("Companion API shutting down")
