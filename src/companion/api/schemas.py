"""Pydantic request/response models for the API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from companion.llm.types import Message


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class ChatRequest(BaseModel):
    model: str
    messages: list[Message]
    system_prompt: str | None = None


class ChatResponse(BaseModel):
    response: str


class OkResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
    kind: str


class AffectionChange(BaseModel):
    amount: int = Field(default=10, ge=0)


class AffectionLevelResponse(BaseModel):
    points: int
    level: int
    tier: str
    name: str
    description: str
    friendship_days: int
    first_interaction: str
    unlocked: list[str]
