"""Error types shared by the chat gateway and the state store."""

from __future__ import annotations


class CompanionError(Exception):
    """Base error; ``str(exc)`` is the text shown to the user."""

    kind = "error"


class OllamaConnectionError(CompanionError):
    """The inference server could not be reached."""

    kind = "connectivity"


class OllamaStatusError(CompanionError):
    """The inference server answered with a non-success status."""

    kind = "protocol"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class OllamaResponseError(CompanionError):
    """A success body did not match the expected response shape."""

    kind = "deserialization"


class StorageError(CompanionError):
    """Creating, reading or writing a state document failed."""

    kind = "filesystem"


class SettingsParseError(CompanionError):
    """The settings document is not a JSON object of the expected types."""

    kind = "deserialization"


class AffectionCorruptedError(CompanionError):
    """The affection document exists but cannot be parsed."""

    kind = "corruption"
