"""API routes: the UI command surface over the gateway and the state store."""

from __future__ import annotations

from fastapi import APIRouter, Request

from companion.affection.levels import UNLOCKS, calculate_level, is_unlocked, tier_for
from companion.affection.progress import (
    backfill_first_interaction,
    decrease_affection,
    friendship_days,
    increase_affection,
)
from companion.api.schemas import (
    AffectionChange,
    AffectionLevelResponse,
    ChatRequest,
    ChatResponse,
    HealthResponse,
    OkResponse,
)
from companion.llm.ollama import OllamaGateway
from companion.llm.types import ConnectionStatus
from companion.storage.models import AffectionData, AppSettings
from companion.storage.store import StateStore

router = APIRouter()


def _gateway(request: Request) -> OllamaGateway:
    return request.app.state.gateway


def _store(request: Request) -> StateStore:
    return request.app.state.store


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse()


# -- chat gateway --------------------------------------------------------------


@router.post("/ollama/chat", response_model=ChatResponse, tags=["ollama"])
async def chat_with_ollama(request: Request, body: ChatRequest) -> ChatResponse:
    reply = await _gateway(request).chat(body.model, body.messages, body.system_prompt)
    return ChatResponse(response=reply)


@router.get("/ollama/models", response_model=list[str], tags=["ollama"])
async def list_ollama_models(request: Request) -> list[str]:
    return await _gateway(request).list_models()


@router.get("/ollama/status", response_model=ConnectionStatus, tags=["ollama"])
async def check_ollama_status(request: Request) -> ConnectionStatus:
    return await _gateway(request).check_status()


# -- affection -----------------------------------------------------------------
# Store operations block on file I/O, so these are plain ``def`` endpoints
# and run in FastAPI's threadpool.


@router.get("/affection", response_model=AffectionData, tags=["affection"])
def get_affection(request: Request) -> AffectionData:
    return _store(request).get_affection()


@router.put("/affection", response_model=OkResponse, tags=["affection"])
def set_affection(request: Request, data: AffectionData) -> OkResponse:
    _store(request).set_affection(data)
    return OkResponse()


@router.post("/affection/reset", response_model=OkResponse, tags=["affection"])
def reset_affection(request: Request) -> OkResponse:
    _store(request).reset_affection()
    return OkResponse()


@router.post("/affection/increase", response_model=AffectionData, tags=["affection"])
def increase(request: Request, change: AffectionChange) -> AffectionData:
    store = _store(request)
    updated = increase_affection(store.get_affection(), change.amount)
    store.set_affection(updated)
    return updated


@router.post("/affection/decrease", response_model=AffectionData, tags=["affection"])
def decrease(request: Request, change: AffectionChange) -> AffectionData:
    store = _store(request)
    updated = decrease_affection(store.get_affection(), change.amount)
    store.set_affection(updated)
    return updated


@router.get("/affection/level", response_model=AffectionLevelResponse, tags=["affection"])
def affection_level(request: Request) -> AffectionLevelResponse:
    data = backfill_first_interaction(_store(request).get_affection())
    tier = tier_for(data.level)
    return AffectionLevelResponse(
        points=data.level,
        level=calculate_level(data.level),
        tier=tier.key,
        name=tier.name,
        description=tier.description,
        friendship_days=friendship_days(data),
        first_interaction=data.first_interaction,
        unlocked=[f for f in UNLOCKS if is_unlocked(data.level, f)],
    )


# -- settings ------------------------------------------------------------------


@router.get("/settings", response_model=AppSettings, tags=["settings"])
def load_settings(request: Request) -> AppSettings:
    return _store(request).load_settings()


@router.put("/settings", response_model=OkResponse, tags=["settings"])
def save_settings(request: Request, settings: AppSettings) -> OkResponse:
    _store(request).save_settings(settings)
    return OkResponse()
