"""Post-processing of model replies: memory tags, emotions and cleanup."""

from __future__ import annotations

import re

_MEMORY_RE = re.compile(r"\[MEMORY: (.*?)\]")
_PLACEHOLDER_RE = re.compile(
    r"(loves|has|favorites|likes|prefers)\s+(an\s+)?(unknown\s+item|X|placeholder)",
    re.IGNORECASE,
)
# Persona traits the model tends to misattribute to the user
_PERSONA_TRAITS = (
    "alternative and indie music",
    "alternative music",
    "indie music",
    "unexpected or nerdy passion",
    "nerdy passions",
    "fluffy animals",
    "small dogs",
    "goth and alt fashion",
    "alt fashion",
)
_MIN_MEMORY_LEN = 5

_BRACKET_RE = re.compile(r"\[.*?\]")
_LEAKED_HEADER_RE = re.compile(r"##\s+(Likes|Dislikes|Key Phrases)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

EMOTION_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "happy": (re.compile(r"\[happy\]", re.I), re.compile(r"\[joy\]", re.I), re.compile("😊|😄|😃|🥰|✨")),
    "sad": (re.compile(r"\[sad\]", re.I), re.compile(r"\[crying\]", re.I), re.compile("😢|😭|🥺")),
    "angry": (re.compile(r"\[angry\]", re.I), re.compile(r"\[mad\]", re.I), re.compile("😠|😤|💢")),
    "surprised": (re.compile(r"\[surprised\]", re.I), re.compile(r"\[shocked\]", re.I), re.compile("😲|😱|!!")),
    "blush": (re.compile(r"\[blush\]", re.I), re.compile(r"\[embarrassed\]", re.I), re.compile("😳|💕|////")),
    "excited": (re.compile(r"\[excited\]", re.I), re.compile(r"\[thrilled\]", re.I), re.compile("🎉|✨|💫")),
    "pout": (re.compile(r"\[pout\]", re.I), re.compile(r"\[hmph\]", re.I), re.compile("😤|😾")),
    "love": (re.compile(r"\[love\]", re.I), re.compile(r"\[heart\]", re.I), re.compile("💗|💕|♡|💓|😍")),
    "thinking": (re.compile(r"\[thinking\]", re.I), re.compile(r"\[hmm\]", re.I), re.compile("🤔|💭")),
}


def extract_memory(text: str) -> str | None:
    """Return the fact inside the first ``[MEMORY: ...]`` tag, if any."""
    match = _MEMORY_RE.search(text)
    return match.group(1) if match else None


def is_valid_memory(fact: str, existing: str | None) -> bool:
    """Reject placeholders, persona traits, tiny facts and duplicates."""
    lowered = fact.lower()
    if len(fact) < _MIN_MEMORY_LEN:
        return False
    if _PLACEHOLDER_RE.search(fact):
        return False
    if any(trait in lowered for trait in _PERSONA_TRAITS):
        return False
    return lowered not in (existing or "").lower()


def append_memory(existing: str | None, fact: str, today: str) -> str:
    entry = f"- {fact} ({today})"
    return f"{existing}\n{entry}" if existing else entry


def detect_emotion(text: str) -> str:
    """Pick the emotion with the most tag/emoji hits; ``neutral`` if none."""
    best, best_score = "neutral", 0
    for emotion, patterns in EMOTION_PATTERNS.items():
        score = sum(len(p.findall(text)) for p in patterns) * 10
        if score > best_score:
            best, best_score = emotion, score
    return best


def clean_reply(text: str) -> str:
    """Strip bracketed tags and prompt artifacts so the reply can be shown or spoken."""
    text = _BRACKET_RE.sub("", text)
    text = _LEAKED_HEADER_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
