"""Wire types for the Ollama chat and model-listing endpoints."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    role: Role
    content: str


class ChatRequest(BaseModel):
    model: str
    messages: list[Message]
    stream: bool = False


class ChatResponse(BaseModel):
    model: str
    message: Message
    done: bool


class ModelDescriptor(BaseModel):
    name: str
    modified_at: str
    size: int


class ModelsResponse(BaseModel):
    models: list[ModelDescriptor]


class ConnectionStatus(BaseModel):
    """Result of a liveness probe; ``error`` is set iff not connected."""

    connected: bool
    error: str | None = None

    @model_validator(mode="after")
    def _error_matches_connected(self) -> "ConnectionStatus":
        if self.connected and self.error is not None:
            raise ValueError("a connected status cannot carry an error")
        if not self.connected and not self.error:
            raise ValueError("a disconnected status must carry an error")
        return self

    @classmethod
    def ok(cls) -> "ConnectionStatus":
        return cls(connected=True)

    @classmethod
    def failed(cls, error: str) -> "ConnectionStatus":
        return cls(connected=False, error=error)
