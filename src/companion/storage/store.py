"""JSON persistence for the affection and settings documents."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from companion.core.config import AFFECTION_FILE, SETTINGS_FILE
from companion.core.errors import (
    AffectionCorruptedError,
    SettingsParseError,
    StorageError,
)
from companion.storage.models import AffectionData, AppSettings

logger = logging.getLogger(__name__)


def _settings_keys() -> dict[str, str]:
    """Map every accepted settings key (attribute or external name) to its external name."""
    keys: dict[str, str] = {}
    for name, field in AppSettings.model_fields.items():
        external = field.alias or name
        keys[name] = external
        keys[external] = external
    return keys


_SETTINGS_KEYS = _settings_keys()


def external_settings_key(key: str) -> str | None:
    """Return the on-disk name for a settings key, or None if it is not a setting."""
    return _SETTINGS_KEYS.get(key)


def _merge_settings(raw: Any) -> AppSettings:
    """Overlay a stored settings document onto the defaults.

    Documents written by older versions lack newer fields; those keep their
    defaults. Unknown keys are dropped, and ``null`` for a field that has a
    non-null default counts as missing.
    """
    if not isinstance(raw, dict):
        raise SettingsParseError(
            f"Failed to parse settings: expected a JSON object, got {type(raw).__name__}"
        )

    merged = AppSettings().to_document()
    for key, value in raw.items():
        external = external_settings_key(key)
        if external is None:
            continue
        if value is None and merged[external] is not None:
            continue
        merged[external] = value

    try:
        return AppSettings.model_validate(merged)
    except ValidationError as e:
        raise SettingsParseError(f"Failed to parse settings: {e}") from e


class StateStore:
    """Reads and writes the two singleton documents in an app data directory.

    There is no locking: concurrent writers race and the last write wins.
    """

    def __init__(
        self,
        data_dir: Path,
        *,
        affection_file: str = AFFECTION_FILE,
        settings_file: str = SETTINGS_FILE,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._affection_path = self._data_dir / affection_file
        self._settings_path = self._data_dir / settings_file

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def affection_path(self) -> Path:
        return self._affection_path

    @property
    def settings_path(self) -> Path:
        return self._settings_path

    # -- affection ---------------------------------------------------------

    def get_affection(self) -> AffectionData:
        """Load affection progress, or the default when nothing is stored yet."""
        path = self._affection_path
        if not path.exists():
            return AffectionData.default()

        try:
            content = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read affection file: {e}") from e

        try:
            return AffectionData.model_validate_json(content.decode("utf-8"))
        except (UnicodeDecodeError, ValidationError) as e:
            raise AffectionCorruptedError(f"Failed to parse affection data: {e}") from e

    def set_affection(self, data: AffectionData) -> None:
        """Overwrite the affection document."""
        self._write_document(self._affection_path, data.model_dump(mode="json"), "affection file")
        logger.debug("Saved affection: level=%d messages=%d", data.level, data.total_messages)

    def reset_affection(self) -> None:
        self.set_affection(AffectionData.default())

    # -- settings ----------------------------------------------------------

    def load_settings(self) -> AppSettings:
        """Load settings, filling any field the stored document lacks."""
        path = self._settings_path
        if not path.exists():
            return AppSettings()

        try:
            content = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read settings file: {e}") from e

        try:
            raw = json.loads(content.decode("utf-8").lstrip("\ufeff"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SettingsParseError(f"Failed to parse settings: {e}") from e

        return _merge_settings(raw)

    def save_settings(self, settings: AppSettings) -> None:
        """Overwrite the settings document."""
        self._write_document(self._settings_path, settings.to_document(), "settings file")
        logger.debug("Saved settings to %s", self._settings_path)

    # -- helpers -----------------------------------------------------------

    def _write_document(self, path: Path, payload: dict[str, Any], label: str) -> None:
        """Write pretty-printed JSON via a temp file and rename over ``path``."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create app data directory: {e}") from e

        content = json.dumps(payload, indent=2, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(content)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {label}: {e}") from e
