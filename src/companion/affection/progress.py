"""Pure updates to affection progress after an interaction."""

from __future__ import annotations

from datetime import datetime, timezone

from companion.affection.levels import MAX_POINTS
from companion.storage.models import AffectionData


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _local_date(timestamp: str) -> str:
    """Calendar date of an ISO timestamp in local time, or "" if unparsable."""
    if not timestamp:
        return ""
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return parsed.astimezone().date().isoformat()


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def backfill_first_interaction(data: AffectionData) -> AffectionData:
    """Documents from before ``first_interaction`` existed reuse the last interaction."""
    if not data.first_interaction and data.last_interaction:
        return data.model_copy(update={"first_interaction": data.last_interaction})
    return data


def increase_affection(
    data: AffectionData, amount: int = 10, now: datetime | None = None
) -> AffectionData:
    """Record one message and add ``amount`` points, capped at the maximum."""
    data = backfill_first_interaction(data)
    moment = now or _now()
    stamp = _iso(moment)
    is_new_day = _local_date(data.last_interaction) != moment.astimezone().date().isoformat()

    if is_new_day:
        days_spoken = data.days_spoken + 1
    else:
        days_spoken = data.days_spoken or 1

    return AffectionData(
        level=min(MAX_POINTS, data.level + amount),
        total_messages=data.total_messages + 1,
        last_interaction=stamp,
        first_interaction=data.first_interaction or stamp,
        days_spoken=days_spoken,
    )


def decrease_affection(
    data: AffectionData, amount: int = 10, now: datetime | None = None
) -> AffectionData:
    """Remove ``amount`` points, never going below zero."""
    moment = now or _now()
    return data.model_copy(
        update={
            "level": max(0, data.level - amount),
            "last_interaction": _iso(moment),
        }
    )


def friendship_days(data: AffectionData) -> int:
    return max(1, data.days_spoken)
