"""Tests for reply post-processing and system prompt assembly."""

from __future__ import annotations

from datetime import datetime

from companion.llm.prompt import build_system_prompt, time_of_day
from companion.llm.replies import (
    append_memory,
    clean_reply,
    detect_emotion,
    extract_memory,
    is_valid_memory,
)
from companion.storage.models import AffectionData, AppSettings


def test_extract_memory():
    text = "Oh nice, a cat! [happy] [MEMORY: User has a cat named Miso]"
    assert extract_memory(text) == "User has a cat named Miso"
    assert extract_memory("no tags here") is None


def test_is_valid_memory_rejects_junk():
    assert is_valid_memory("User has a cat named Miso", None)
    assert not is_valid_memory("cat", None)
    assert not is_valid_memory("User loves an unknown item", None)
    assert not is_valid_memory("User likes indie music a lot", None)
    assert not is_valid_memory("user has a cat named miso", "- User has a cat named Miso (2026-10-01)")


def test_append_memory():
    assert append_memory(None, "Likes tea", "2026-10-18") == "- Likes tea (2026-10-18)"
    assert append_memory("- A (x)", "B", "y") == "- A (x)\n- B (y)"


def test_detect_emotion():
    assert detect_emotion("[blush] stop it [blush] [happy]") == "blush"
    assert detect_emotion("That's actually wild 😍") == "love"
    assert detect_emotion("plain text") == "neutral"


def test_clean_reply():
    raw = "Okay, I see you [happy]  [MEMORY: User plays chess]\n## Likes\n nice"
    assert clean_reply(raw) == "Okay, I see you nice"


def test_time_of_day():
    assert time_of_day(6) == "Morning"
    assert time_of_day(12) == "Afternoon"
    assert time_of_day(20) == "Evening"
    assert time_of_day(2) == "Late night"


def test_build_system_prompt():
    affection = AffectionData.default().model_copy(update={"level": 520})
    settings = AppSettings(user_name="Sam", memories="- Plays chess (2026-10-01)")

    prompt = build_system_prompt(affection, settings, "Suki", now=datetime(2026, 10, 18, 9, 0))

    assert prompt.startswith("You are Suki")
    assert "User's Name: Sam" in prompt
    assert "Time of day: Morning" in prompt
    assert "Things you remember about Sam" in prompt
    assert "- Plays chess" in prompt
    assert "Level 5: Devoted" in prompt


def test_build_system_prompt_defaults_name():
    prompt = build_system_prompt(AffectionData.default(), AppSettings(), now=datetime(2026, 1, 1, 23, 30))
    assert "User's Name: Friend" in prompt
    assert "Things you remember" not in prompt
    assert "Level 0: Basic" in prompt
