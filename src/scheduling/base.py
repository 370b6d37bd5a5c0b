"""
Scheduling strategy interface.

A strategy reorders the remaining round queue so that missed cards come
back at sensible positions. Strategies are pure with respect to their
inputs: they never mutate `missed_cards` or `upcoming`, and they never
raise for well-typed inputs (empty queues and unknown card indices
included).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol

from loguru import logger

from src.core.models import Card, MissedCard, SchedulerConfig


class ISchedulingStrategy(Protocol):
    """Structural interface accepted by the registry."""

    name: str
    description: str

    def schedule(
        self,
        missed_cards: Sequence[MissedCard],
        upcoming: Sequence[Card],
        config: SchedulerConfig,
        source_cards: Sequence[Card] | None = None,
    ) -> list[Card]:
        """Return the new upcoming queue with missed cards reinserted."""
        ...


class SchedulingStrategy(ABC):
    """
    Base class for the built-in strategies.

    Provides source-card lookup with the placeholder fallback and keeps a
    running count of placeholders so callers can detect the condition.
    """

    name: str = ""
    description: str = ""

    def __init__(self):
        self.placeholder_count = 0

    @abstractmethod
    def schedule(
        self,
        missed_cards: Sequence[MissedCard],
        upcoming: Sequence[Card],
        config: SchedulerConfig,
        source_cards: Sequence[Card] | None = None,
    ) -> list[Card]:
        """
        Reinsert missed cards into the upcoming queue.

        Args:
            missed_cards: Cards awaiting reinsertion
            upcoming: Remaining queue, in order
            config: Validated scheduler configuration
            source_cards: Optional full card list used to look up cards
                that are no longer in `upcoming`

        Returns:
            New queue containing every upcoming card plus reinsertions
        """

    def resolve_card(
        self,
        missed: MissedCard,
        upcoming: Sequence[Card],
        source_cards: Sequence[Card] | None = None,
    ) -> Card:
        """
        Find the card to reinsert for a missed entry.

        Looks in the upcoming queue first, then in `source_cards`. Falls
        back to an empty placeholder when neither has the card.
        """
        for pool in (upcoming, source_cards or ()):
            for card in pool:
                if card.idx == missed.card_index:
                    return card

        self.placeholder_count += 1
        logger.warning(
            f"{self.name}: card {missed.card_index} not found "
            f"(upcoming={len(upcoming)}, source={len(source_cards or ())}), "
            f"reinserting placeholder"
        )
        return Card.placeholder(missed.card_index)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
