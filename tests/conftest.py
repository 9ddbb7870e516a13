"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from companion.core.config import Settings
from companion.llm.ollama import OllamaGateway
from companion.storage.store import StateStore

BASE_URL = "http://ollama.test:11434"


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Application data directory that does not exist yet."""
    return tmp_path / "appdata"


@pytest.fixture
def settings(tmp_data_dir: Path) -> Settings:
    """Create Settings pointing at a temp data directory."""
    return Settings(
        ollama_base_url=BASE_URL,
        data_dir=tmp_data_dir,
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def store(tmp_data_dir: Path) -> StateStore:
    return StateStore(tmp_data_dir)


def chat_reply(content: str, model: str = "llama3.2") -> dict:
    return {
        "model": model,
        "message": {"role": "assistant", "content": content},
        "done": True,
    }


def tags_reply(*names: str) -> dict:
    return {
        "models": [
            {"name": n, "modified_at": "2026-01-01T00:00:00Z", "size": 1024} for n in names
        ]
    }


class FakeOllama:
    """Records requests and answers them from a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    def gateway(self) -> OllamaGateway:
        return OllamaGateway(BASE_URL, transport=httpx.MockTransport(self))


@pytest.fixture
def fake_ollama() -> Callable[..., FakeOllama]:
    """Build a FakeOllama from a handler or a fixed response."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        *,
        status_code: int = 200,
        json_body: dict | None = None,
    ) -> FakeOllama:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status_code, json=json_body)
        return FakeOllama(handler)

    return _make
