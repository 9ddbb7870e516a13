"""Tests for the CLI commands."""

from __future__ import annotations

import json

import httpx
import pytest
from click.testing import CliRunner

from conftest import FakeOllama, tags_reply
from companion.cli import app as cli_app
from companion.core.config import Settings
from companion.storage.models import AffectionData
from companion.storage.store import StateStore


@pytest.fixture
def runner(monkeypatch, settings: Settings) -> CliRunner:
    monkeypatch.setattr(cli_app, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_app, "setup_logging", lambda *args, **kwargs: None)
    return CliRunner()


def _use_fake(monkeypatch, fake: FakeOllama) -> None:
    monkeypatch.setattr(cli_app, "OllamaGateway", lambda base_url: fake.gateway())


def test_status_connected(runner, monkeypatch, fake_ollama):
    _use_fake(monkeypatch, fake_ollama(json_body=tags_reply()))
    result = runner.invoke(cli_app.cli, ["status"])
    assert result.exit_code == 0
    assert "Connected" in result.output


def test_status_disconnected(runner, monkeypatch, fake_ollama):
    _use_fake(monkeypatch, fake_ollama(status_code=500))
    result = runner.invoke(cli_app.cli, ["status"])
    assert result.exit_code == 1
    assert "500" in result.output


def test_models(runner, monkeypatch, fake_ollama):
    _use_fake(monkeypatch, fake_ollama(json_body=tags_reply("llama3.2", "mistral")))
    result = runner.invoke(cli_app.cli, ["models"])
    assert result.exit_code == 0
    assert "llama3.2" in result.output
    assert "mistral" in result.output


def test_ask_uses_saved_model(runner, monkeypatch, fake_ollama, settings: Settings):
    fake = fake_ollama(
        lambda request: httpx.Response(
            200,
            json={"model": "m", "message": {"role": "assistant", "content": "Hi back"}, "done": True},
        )
    )
    _use_fake(monkeypatch, fake)

    result = runner.invoke(cli_app.cli, ["ask", "hello", "there"])

    assert result.exit_code == 0
    assert "Hi back" in result.output
    assert fake.last_body["model"] == "llama3.2"
    assert fake.last_body["messages"] == [{"role": "user", "content": "hello there"}]


def test_ask_reports_connection_error(runner, monkeypatch, fake_ollama):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    _use_fake(monkeypatch, fake_ollama(refuse))
    result = runner.invoke(cli_app.cli, ["ask", "hello"])
    assert result.exit_code == 1
    assert "Failed to connect to Ollama" in result.output


def test_affection_show_and_reset(runner, settings: Settings):
    store = StateStore(settings.data_dir)
    store.set_affection(
        AffectionData(
            level=540,
            total_messages=20,
            last_interaction="2026-10-18T10:00:00Z",
            first_interaction="2026-10-01T10:00:00Z",
            days_spoken=6,
        )
    )

    shown = runner.invoke(cli_app.cli, ["affection", "show"])
    assert shown.exit_code == 0
    assert "Devoted" in shown.output

    reset = runner.invoke(cli_app.cli, ["affection", "reset", "--yes"])
    assert reset.exit_code == 0
    assert store.get_affection() == AffectionData.default()


def test_settings_set_and_show(runner, settings: Settings):
    assert runner.invoke(cli_app.cli, ["settings", "set", "userName", "Sam"]).exit_code == 0
    assert runner.invoke(cli_app.cli, ["settings", "set", "voice_enabled", "false"]).exit_code == 0

    stored = json.loads(settings.settings_path.read_text(encoding="utf-8"))
    assert stored["userName"] == "Sam"
    assert stored["voice_enabled"] is False

    shown = runner.invoke(cli_app.cli, ["settings", "show"])
    assert shown.exit_code == 0
    assert "Sam" in shown.output


def test_settings_set_rejects_unknown_key(runner):
    result = runner.invoke(cli_app.cli, ["settings", "set", "favoriteColor", "blue"])
    assert result.exit_code == 2
    assert "Unknown setting" in result.output


def test_affection_show_backfills_first_interaction(runner, settings: Settings):
    StateStore(settings.data_dir).set_affection(
        AffectionData(
            level=10,
            total_messages=1,
            last_interaction="2026-10-18T10:00:00Z",
            first_interaction="",
            days_spoken=1,
        )
    )

    shown = runner.invoke(cli_app.cli, ["affection", "show"])

    assert shown.exit_code == 0
    assert shown.output.count("2026-10-18T10:00:00Z") == 2


def test_corrupted_settings_file_is_reported(runner, settings: Settings):
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.settings_path.write_bytes(b'{"userName": "\xc3\x28"}')

    result = runner.invoke(cli_app.cli, ["settings", "show"])

    assert result.exit_code == 1
    assert "Failed to parse settings" in result.output
