"""Application configuration via environment variables."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

APP_NAME = "companion"

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
AFFECTION_FILE = "affection.json"
SETTINGS_FILE = "settings.json"


def default_data_dir() -> Path:
    """Return the per-user application data directory for this platform."""
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


class Settings(BaseSettings):
    model_config = {"env_prefix": "COMPANION_", "env_file": ".env", "extra": "ignore"}

    # Inference server
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL

    # Paths
    data_dir: Path = Field(default_factory=default_data_dir)

    # Server
    host: str = "127.0.0.1"
    port: int = 51431

    # Logging
    log_level: str = "INFO"

    # Persona used when building system prompts
    persona_name: str = "Suki"

    @property
    def affection_path(self) -> Path:
        return self.data_dir / AFFECTION_FILE

    @property
    def settings_path(self) -> Path:
        return self.data_dir / SETTINGS_FILE

    @property
    def app_log_path(self) -> Path:
        return self.data_dir / "logs" / "app.log"

    @property
    def history_path(self) -> Path:
        return self.data_dir / "logs" / ".chat_history"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
