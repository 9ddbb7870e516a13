"""FastAPI app factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from companion.api.routes import router
from companion.api.schemas import ErrorResponse
from companion.core.config import Settings, get_settings
from companion.core.errors import CompanionError
from companion.core.events import lifespan
from companion.llm.ollama import OllamaGateway
from companion.storage.store import StateStore

logger = logging.getLogger(__name__)

# Failures that come from the inference server rather than local state
_UPSTREAM_KINDS = {"connectivity", "protocol"}


async def _companion_error_handler(request: Request, exc: CompanionError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    upstream = exc.kind in _UPSTREAM_KINDS or request.url.path.startswith("/ollama")
    return JSONResponse(
        status_code=502 if upstream else 500,
        content=ErrorResponse(error=str(exc), kind=exc.kind).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Companion",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = OllamaGateway(settings.ollama_base_url)
    app.state.store = StateStore(settings.data_dir)
    app.add_exception_handler(CompanionError, _companion_error_handler)
    app.include_router(router)
    return app
