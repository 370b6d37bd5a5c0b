"""
Shared numeric helpers for scheduling and mastery.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

# Response slower than this adds to a missed card's difficulty
SLOW_RESPONSE_MS = 10_000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def calculate_miss_difficulty(miss_count: int, response_time_ms: int = 0) -> float:
    """
    Difficulty of a missed card.

    Formula: min(1, misses × 0.2 + 0.3 if the answer took longer than 10s)

    Args:
        miss_count: Times the card was missed this round
        response_time_ms: Time spent on the failed answer

    Returns:
        Difficulty between 0 and 1
    """
    slow_penalty = 0.3 if response_time_ms > SLOW_RESPONSE_MS else 0.0
    return min(1.0, max(0, miss_count) * 0.2 + slow_penalty)


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def seconds_between(start: datetime | None, end: datetime) -> float:
    """Elapsed seconds from start to end, never negative."""
    if start is None:
        return 0.0
    return max(0.0, (ensure_aware(end) - ensure_aware(start)).total_seconds())
