"""Click CLI group mirroring the UI commands, plus chat and serve."""

from __future__ import annotations

import asyncio
import json
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from companion.core.config import Settings, get_settings
from companion.core.errors import CompanionError
from companion.core.logging import setup_logging
from companion.llm.ollama import OllamaGateway
from companion.storage.store import StateStore

console = Console()


def _setup() -> Settings:
    settings = get_settings()
    setup_logging(settings.log_level, settings.app_log_path)
    return settings


def _fail(exc: CompanionError) -> NoReturn:
    console.print(f"[red]Error: {escape(str(exc))}[/red]")
    raise SystemExit(1)


@click.group()
def cli() -> None:
    """Companion backend CLI."""


@cli.command()
def status() -> None:
    """Check whether the Ollama server is reachable."""
    settings = _setup()
    result = asyncio.run(OllamaGateway(settings.ollama_base_url).check_status())
    if result.connected:
        console.print(f"[green]Connected[/green] to {settings.ollama_base_url}")
    else:
        console.print(f"[red]Disconnected:[/red] {escape(result.error or '')}")
        raise SystemExit(1)


@cli.command()
def models() -> None:
    """List models installed on the Ollama server."""
    settings = _setup()
    try:
        names = asyncio.run(OllamaGateway(settings.ollama_base_url).list_models())
    except CompanionError as e:
        _fail(e)

    table = Table(title="Ollama Models")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)


@cli.command()
@click.argument("question", nargs=-1, required=True)
@click.option("--model", default=None, help="Model to use (defaults to the saved setting)")
@click.option("--system", "system_prompt", default=None, help="System prompt to send first")
def ask(question: tuple[str, ...], model: str | None, system_prompt: str | None) -> None:
    """Ask a single question without touching affection or memories."""
    settings = _setup()
    store = StateStore(settings.data_dir)
    gateway = OllamaGateway(settings.ollama_base_url)
    try:
        model = model or store.load_settings().ollama_model
        reply = asyncio.run(
            gateway.chat(model, [{"role": "user", "content": " ".join(question)}], system_prompt)
        )
    except CompanionError as e:
        _fail(e)
    console.print(reply, markup=False)


@cli.command()
def chat() -> None:
    """Start an interactive chat session with the companion."""
    settings = _setup()

    from companion.cli.chat import ChatInterface

    interface = ChatInterface(settings, console)
    asyncio.run(interface.run())


@cli.group()
def affection() -> None:
    """Inspect or reset affection progress."""


@affection.command("show")
def affection_show() -> None:
    from companion.affection.levels import calculate_level, tier_for
    from companion.affection.progress import backfill_first_interaction, friendship_days

    settings = _setup()
    try:
        data = StateStore(settings.data_dir).get_affection()
    except CompanionError as e:
        _fail(e)

    data = backfill_first_interaction(data)
    tier = tier_for(data.level)
    table = Table(title="Affection")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Points", str(data.level))
    table.add_row("Level", f"{calculate_level(data.level)} ({tier.name})")
    table.add_row("Messages", str(data.total_messages))
    table.add_row("Days spoken", str(friendship_days(data)))
    table.add_row("First interaction", data.first_interaction or "-")
    table.add_row("Last interaction", data.last_interaction or "-")
    console.print(table)


@affection.command("reset")
@click.confirmation_option(prompt="Reset affection progress to zero?")
def affection_reset() -> None:
    settings = _setup()
    try:
        StateStore(settings.data_dir).reset_affection()
    except CompanionError as e:
        _fail(e)
    console.print("[green]Affection reset.[/green]")


@cli.group("settings")
def settings_group() -> None:
    """Inspect or change saved settings."""


@settings_group.command("show")
def settings_show() -> None:
    settings = _setup()
    try:
        current = StateStore(settings.data_dir).load_settings()
    except CompanionError as e:
        _fail(e)
    console.print_json(data=current.to_document())


@settings_group.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key: str, value: str) -> None:
    """Set KEY to VALUE. VALUE is parsed as JSON when possible (true, 3, null)."""
    from pydantic import ValidationError

    from companion.storage.models import AppSettings
    from companion.storage.store import external_settings_key

    settings = _setup()
    external = external_settings_key(key)
    if external is None:
        console.print(f"[red]Unknown setting: {escape(key)}[/red]")
        raise SystemExit(2)

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    store = StateStore(settings.data_dir)
    try:
        document = store.load_settings().to_document()
        document[external] = parsed
        store.save_settings(AppSettings.model_validate(document))
    except ValidationError as e:
        console.print(f"[red]Invalid value for {escape(key)}: {escape(e.errors()[0]['msg'])}[/red]")
        raise SystemExit(2)
    except CompanionError as e:
        _fail(e)
    console.print(f"[green]{external} updated.[/green]")


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
def serve(host: str | None, port: int | None) -> None:
    """Start the API server."""
    import uvicorn

    settings = _setup()

    uvicorn.run(
        "companion.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=False,
    )
