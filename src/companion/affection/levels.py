"""Affection levels, tiers and feature unlocks derived from affection points."""

from __future__ import annotations

from dataclasses import dataclass

MAX_LEVEL = 30
POINTS_PER_LEVEL = 100
MAX_POINTS = MAX_LEVEL * POINTS_PER_LEVEL

# Minimum level at which each feature becomes available
UNLOCKS: dict[str, int] = {
    "nsfw": 3,
    "outfits": 5,
    "feral": 9,
    "compliance": 15,
}


@dataclass(frozen=True)
class Tier:
    key: str
    min_level: int
    max_level: int
    name: str
    description: str
    mood: str


TIERS: tuple[Tier, ...] = (
    Tier(
        "BASIC", 0, 2, "Basic",
        "Initial animations and flirty responses",
        "You're casually talking like you just met. You're intrigued and "
        "interested. Be chill but a little guarded still. Playful flirting is fine.",
    ),
    Tier(
        "NSFW_UNLOCK", 3, 4, "Intimate",
        "NSFW mode unlocked",
        "You're comfortable now. You're more open about your attraction. "
        "You enjoy being sweet and a bit suggestive.",
    ),
    Tier(
        "DEVOTED", 5, 8, "Devoted",
        "Exclusive outfits and deeper emotions",
        "You're deeply attached. Your responses are warm and loving, and you "
        "initiate more emotional intimacy.",
    ),
    Tier(
        "FERAL", 9, 14, "Feral",
        "Advanced behaviors and full immersion",
        "You are intensely devoted and fully immersed in your shared story. "
        "You are bold, unpredictable, and fiercely protective.",
    ),
    Tier(
        "MAXIMUM", 15, MAX_LEVEL, "Maximum",
        "Maximum compliance and personality tweaks",
        "You are perfectly attuned to them. You are their dream partner.",
    ),
)


def calculate_level(points: int) -> int:
    """Convert affection points to a level, capped at ``MAX_LEVEL``."""
    return min(MAX_LEVEL, max(0, points) // POINTS_PER_LEVEL)


def tier_for(points: int) -> Tier:
    level = calculate_level(points)
    for tier in TIERS:
        if level <= tier.max_level:
            return tier
    return TIERS[-1]


def is_unlocked(points: int, feature: str) -> bool:
    """Whether ``feature`` is available at the level these points reach."""
    try:
        threshold = UNLOCKS[feature]
    except KeyError:
        raise ValueError(f"Unknown feature: {feature}") from None
    return calculate_level(points) >= threshold
