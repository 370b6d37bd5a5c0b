"""
Missed-card bookkeeping for a single round.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from src.core.formulas import calculate_miss_difficulty, utc_now
from src.core.models import MissedCard


class MissedCardTracker:
    """
    Keeps one MissedCard per card index, in first-miss order.

    Entries are created on the first miss, refreshed on every later miss,
    and removed when the card is answered correctly again.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or utc_now
        self._missed: dict[int, MissedCard] = {}

    def track_miss(self, card_index: int, response_time_ms: int = 0) -> MissedCard:
        existing = self._missed.get(card_index)
        miss_count = existing.miss_count + 1 if existing else 1

        missed = MissedCard(
            card_index=card_index,
            difficulty=calculate_miss_difficulty(miss_count, response_time_ms),
            miss_count=miss_count,
            last_seen=self.clock(),
            response_time_ms=response_time_ms,
        )
        self._missed[card_index] = missed
        return missed

    def resolve(self, card_index: int) -> MissedCard | None:
        """Remove a card that has been answered correctly."""
        return self._missed.pop(card_index, None)

    def pending(self, exclude: Iterable[int] = ()) -> list[MissedCard]:
        """Missed cards not already waiting in the queue."""
        excluded = set(exclude)
        return [m for m in self._missed.values() if m.card_index not in excluded]

    def load(self, missed_cards: Iterable[MissedCard]) -> None:
        self._missed = {m.card_index: m for m in missed_cards}

    def get(self, card_index: int) -> MissedCard | None:
        return self._missed.get(card_index)

    def values(self) -> list[MissedCard]:
        return list(self._missed.values())

    def clear(self) -> None:
        self._missed.clear()

    def __contains__(self, card_index: object) -> bool:
        return card_index in self._missed

    def __len__(self) -> int:
        return len(self._missed)
