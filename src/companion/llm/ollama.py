"""Non-streaming gateway to a local Ollama server."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from companion.core.config import DEFAULT_OLLAMA_BASE_URL
from companion.core.errors import (
    OllamaConnectionError,
    OllamaResponseError,
    OllamaStatusError,
)
from companion.core.http import make_httpx_client
from companion.llm.types import (
    ChatRequest,
    ChatResponse,
    ConnectionStatus,
    Message,
    ModelsResponse,
    Role,
)

logger = logging.getLogger(__name__)


def _status_text(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


class OllamaGateway:
    """Stateless bridge to the Ollama chat and model-listing endpoints.

    Each call opens its own client and makes exactly one attempt.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_BASE_URL,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        return make_httpx_client(transport=self._transport)

    @staticmethod
    def build_request(
        model: str,
        messages: Sequence[Message | dict[str, Any]],
        system_prompt: str | None = None,
    ) -> ChatRequest:
        """Build the request body, putting the system prompt first when given."""
        all_messages: list[Message] = []
        if system_prompt is not None:
            all_messages.append(Message(role=Role.SYSTEM, content=system_prompt))
        all_messages.extend(Message.model_validate(m) for m in messages)
        return ChatRequest(model=model, messages=all_messages, stream=False)

    async def chat(
        self,
        model: str,
        messages: Sequence[Message | dict[str, Any]],
        system_prompt: str | None = None,
    ) -> str:
        """Send a conversation and return the assistant's reply text."""
        request = self.build_request(model, messages, system_prompt)
        logger.debug("Chat request to %s with %d messages", model, len(request.messages))

        async with self._client() as client:
            try:
                response = await client.post(
                    f"{self._base_url}/api/chat",
                    json=request.model_dump(mode="json"),
                )
            except (httpx.RequestError, httpx.InvalidURL) as e:
                raise OllamaConnectionError(f"Failed to connect to Ollama: {e}") from e

        if not response.is_success:
            raise OllamaStatusError(
                f"Ollama error: {_status_text(response)}", response.status_code
            )

        try:
            chat_response = ChatResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise OllamaResponseError(f"Failed to parse Ollama response: {e}") from e

        return chat_response.message.content

    async def list_models(self) -> list[str]:
        """Return the names of installed models in server order."""
        async with self._client() as client:
            try:
                response = await client.get(f"{self._base_url}/api/tags")
            except (httpx.RequestError, httpx.InvalidURL) as e:
                raise OllamaConnectionError(f"Failed to connect to Ollama: {e}") from e

        if not response.is_success:
            raise OllamaStatusError(
                f"Ollama error: {_status_text(response)}", response.status_code
            )

        try:
            models_response = ModelsResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise OllamaResponseError(f"Failed to parse models response: {e}") from e

        return [m.name for m in models_response.models]

    async def check_status(self) -> ConnectionStatus:
        """Probe the server. Never raises; failures become a disconnected status."""
        try:
            async with self._client() as client:
                response = await client.get(f"{self._base_url}/api/tags")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return ConnectionStatus.failed(f"Cannot connect to Ollama: {e}")

        if response.is_success:
            return ConnectionStatus.ok()
        return ConnectionStatus.failed(f"Ollama returned status: {_status_text(response)}")
