"""System prompt assembly from persona, settings and affection."""

from __future__ import annotations

from datetime import datetime

from companion.affection.levels import calculate_level, tier_for
from companion.storage.models import AffectionData, AppSettings


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "Morning"
    if 12 <= hour < 18:
        return "Afternoon"
    if 18 <= hour < 23:
        return "Evening"
    return "Late night"


def build_system_prompt(
    affection: AffectionData,
    settings: AppSettings,
    persona_name: str = "Suki",
    now: datetime | None = None,
) -> str:
    """Build the system prompt for one chat turn."""
    moment = now or datetime.now()
    user_name = settings.user_name or "Friend"
    level = calculate_level(affection.level)
    tier = tier_for(affection.level)

    sections = [
        f"You are {persona_name}, 22, a warm and playful companion.\n"
        f"User's Name: {user_name}",
        "## Speaking Style\n"
        "- Keep responses SHORT, 1-2 sentences, like reacting in person\n"
        "- Talk like a loving partner, not an assistant\n"
        "- Express emotions with tags like [happy], [blush], [excited], [pout], "
        "[sad], [thinking], [love], [surprised]",
        f"Time of day: {time_of_day(moment.hour)}",
    ]
    if settings.memories:
        sections.append(f"## Things you remember about {user_name}:\n{settings.memories}")
    sections.append(f"## Current Mood (Level {level}: {tier.name})\n{tier.mood}")
    sections.append(
        "## Important Rules\n"
        "- If the user EXPLICITLY mentions a NEW fact about themselves, save it by "
        "adding [MEMORY: <fact>] at the end.\n"
        "- NEVER save your own traits, likes, or backstory as a memory.\n"
        "- ONLY save facts the user actually said."
    )
    return "\n\n".join(sections)
