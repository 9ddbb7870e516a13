"""Persisted document models: affection progress and app settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AffectionData(BaseModel):
    """Relationship progress. Every field is mandatory on disk.

    ``level`` holds raw affection points; see ``companion.affection.levels``
    for the level derived from it.
    """

    level: int = Field(ge=0, strict=True)
    total_messages: int = Field(ge=0, strict=True)
    last_interaction: str = Field(strict=True)
    first_interaction: str = Field(strict=True)
    days_spoken: int = Field(ge=0, strict=True)

    @classmethod
    def default(cls) -> "AffectionData":
        """A fresh relationship: no points, no messages, no timestamps."""
        return cls(
            level=0,
            total_messages=0,
            last_interaction="",
            first_interaction="",
            days_spoken=0,
        )


class AppSettings(BaseModel):
    """User preferences.

    Optional UI fields use camelCase names on disk; the snake_case attribute
    names are accepted on input as well.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ollama_model: str = "llama3.2"
    voice_id: str = "af_heart"
    voice_enabled: bool = True
    vrm_model_path: str | None = None
    nsfw_enabled: bool = False
    user_name: str | None = Field(default=None, alias="userName")
    memories: str | None = None
    selected_outfit: str | None = Field(default=None, alias="selectedOutfit")
    selected_hair: str | None = Field(default=None, alias="selectedHair")
    selected_stage: str | None = Field(default=None, alias="selectedStage")
    selected_hair_color: str | None = Field(default=None, alias="selectedHairColor")
    captions_enabled: bool | None = Field(default=True, alias="captionsEnabled")
    affection_data: AffectionData | None = Field(default=None, alias="affectionData")

    def to_document(self) -> dict:
        """Serialize with the external field names."""
        return self.model_dump(mode="json", by_alias=True)
