"""One conversation turn: prompt, chat, remember, reward."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from companion.affection.progress import increase_affection
from companion.llm.ollama import OllamaGateway
from companion.llm.prompt import build_system_prompt
from companion.llm.replies import (
    append_memory,
    clean_reply,
    detect_emotion,
    extract_memory,
    is_valid_memory,
)
from companion.llm.types import Message, Role
from companion.storage.store import StateStore

logger = logging.getLogger(__name__)

# Points awarded per completed turn
TURN_AFFECTION = 1


@dataclass
class TurnResult:
    reply: str
    emotion: str
    memory_saved: str | None = None


class ChatTurn:
    """Composes the gateway and the store the way the UI does for each message."""

    def __init__(
        self,
        gateway: OllamaGateway,
        store: StateStore,
        persona_name: str = "Suki",
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._persona_name = persona_name

    async def run(
        self,
        history: Sequence[Message],
        user_text: str,
        now: datetime | None = None,
    ) -> TurnResult:
        settings = await asyncio.to_thread(self._store.load_settings)
        affection = await asyncio.to_thread(self._store.get_affection)

        system_prompt = build_system_prompt(affection, settings, self._persona_name, now)
        messages = [*history, Message(role=Role.USER, content=user_text)]
        raw = await self._gateway.chat(settings.ollama_model, messages, system_prompt)

        saved: str | None = None
        fact = extract_memory(raw)
        if fact is not None:
            if is_valid_memory(fact, settings.memories):
                today = (now or datetime.now()).date().isoformat()
                settings = settings.model_copy(
                    update={"memories": append_memory(settings.memories, fact, today)}
                )
                await asyncio.to_thread(self._store.save_settings, settings)
                saved = fact
                logger.info("Saved memory: %s", fact)
            else:
                logger.debug("Skipping memory (invalid or duplicate): %s", fact)

        updated = increase_affection(affection, TURN_AFFECTION, now)
        await asyncio.to_thread(self._store.set_affection, updated)

        return TurnResult(reply=clean_reply(raw), emotion=detect_emotion(raw), memory_saved=saved)
