"""Interactive chat interface with prompt_toolkit input."""

from __future__ import annotations

import asyncio
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.markup import escape

from companion.affection.levels import calculate_level, tier_for
from companion.conversation.turn import ChatTurn
from companion.core.config import Settings
from companion.core.errors import CompanionError
from companion.llm.ollama import OllamaGateway
from companion.llm.types import Message, Role
from companion.storage.store import StateStore

logger = logging.getLogger(__name__)


class ChatInterface:
    """Terminal stand-in for the desktop UI's chat window."""

    def __init__(self, settings: Settings, console: Console | None = None) -> None:
        self._settings = settings
        self._console = console or Console()
        self._gateway = OllamaGateway(settings.ollama_base_url)
        self._store = StateStore(settings.data_dir)
        self._turn = ChatTurn(self._gateway, self._store, settings.persona_name)
        self._history: list[Message] = []

    async def handle_message(self, user_input: str) -> str:
        result = await self._turn.run(self._history, user_input)
        self._history.append(Message(role=Role.USER, content=user_input))
        self._history.append(Message(role=Role.ASSISTANT, content=result.reply))

        name = self._settings.persona_name
        self._console.print(f"[bold magenta]{name}[/bold magenta] [dim]({result.emotion})[/dim]: {escape(result.reply)}")
        if result.memory_saved:
            self._console.print(f"[dim]Remembered: {escape(result.memory_saved)}[/dim]")
        return result.reply

    async def run(self) -> None:
        """Main interactive chat loop."""
        status = await self._gateway.check_status()
        if not status.connected:
            self._console.print(f"[red]{escape(status.error or '')}[/red]")
            self._console.print("[dim]Start Ollama and try again.[/dim]")
            return

        affection = await asyncio.to_thread(self._store.get_affection)
        tier = tier_for(affection.level)
        self._console.print(
            f"[bold blue]{self._settings.persona_name}[/bold blue] - "
            f"level {calculate_level(affection.level)} ({tier.name}). Ctrl+C to exit\n"
        )

        history_path = self._settings.history_path
        history_path.parent.mkdir(parents=True, exist_ok=True)
        prompt_session: PromptSession = PromptSession(history=FileHistory(str(history_path)))

        while True:
            try:
                user_input = await prompt_session.prompt_async("You: ")
            except (EOFError, KeyboardInterrupt):
                self._console.print("\n[dim]Goodbye![/dim]")
                break

            user_input = user_input.strip()
            if not user_input:
                continue

            try:
                await self.handle_message(user_input)
            except CompanionError as e:
                logger.warning("Chat turn failed: %s", e)
                self._console.print(f"[red]Error: {escape(str(e))}[/red]")
