"""
Core domain types for in-session spaced reinforcement.

Design:
- Card: immutable content unit received from the deck collaborator
- MissedCard: transient record of a card answered incorrectly this round
- Aggressiveness: how soon missed cards reappear (Leitner-Box)
- SchedulerConfig: validated, immutable tuning shared by all strategies
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.core.errors import InvalidConfigurationError
from src.core.formulas import seconds_between


@dataclass(frozen=True)
class Card:
    """A card in the round queue. Only `idx` is interpreted by the engine."""

    idx: int
    name: str = ""
    side_a: str = ""
    side_b: str = ""
    side_c: str | None = None
    side_d: str | None = None
    side_e: str | None = None
    side_f: str | None = None
    level: int = 1

    @classmethod
    def placeholder(cls, idx: int) -> Card:
        """Degraded card used when the source card cannot be found."""
        return cls(idx=idx, name=f"Card {idx}", level=1)


@dataclass(frozen=True)
class MissedCard:
    """A card answered incorrectly in the current round, pending reinsertion."""

    card_index: int
    difficulty: float = 0.5  # 0-1
    miss_count: int = 1
    last_seen: datetime | None = None
    response_time_ms: int = 0

    def seconds_since_seen(self, now: datetime) -> float:
        return seconds_between(self.last_seen, now)


class Aggressiveness(str, Enum):
    """
    Reinsertion aggressiveness.

    Higher aggressiveness shortens Leitner intervals so missed cards come back sooner.
    """

    GENTLE = "gentle"
    BALANCED = "balanced"
    INTENSIVE = "intensive"

    @property
    def multiplier(self) -> float:
        return {
            Aggressiveness.GENTLE: 1.5,
            Aggressiveness.BALANCED: 1.0,
            Aggressiveness.INTENSIVE: 0.5,
        }[self]


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Tuning parameters shared by all scheduling strategies.

    Defaults match the learn-mode preferences shipped with the app.
    Validation happens at construction so no strategy ever sees a bad config.
    """

    min_spacing: int = 2  # Minimum cards before a missed card reappears
    max_spacing: int = 8  # Maximum spacing for easy, rarely-missed cards
    cluster_limit: int = 2  # Max consecutive reinserted cards
    progress_ratio: float = 0.3  # Min share of the queue that is new material
    difficulty_weight: float = 0.5  # How much difficulty pulls a card earlier
    aggressiveness: Aggressiveness = Aggressiveness.BALANCED

    def __post_init__(self):
        try:
            aggressiveness = Aggressiveness(self.aggressiveness)
        except ValueError:
            raise InvalidConfigurationError(
                f"aggressiveness must be one of "
                f"{[a.value for a in Aggressiveness]}, got {self.aggressiveness!r}"
            ) from None
        object.__setattr__(self, "aggressiveness", aggressiveness)

        if self.min_spacing < 0:
            raise InvalidConfigurationError(
                f"min_spacing must be >= 0, got {self.min_spacing}"
            )
        if self.max_spacing < self.min_spacing:
            raise InvalidConfigurationError(
                f"max_spacing ({self.max_spacing}) must be >= "
                f"min_spacing ({self.min_spacing})"
            )
        if self.cluster_limit < 1:
            raise InvalidConfigurationError(
                f"cluster_limit must be >= 1, got {self.cluster_limit}"
            )
        if not 0.0 <= self.progress_ratio <= 1.0:
            raise InvalidConfigurationError(
                f"progress_ratio must be within [0, 1], got {self.progress_ratio}"
            )
        if not 0.0 <= self.difficulty_weight <= 1.0:
            raise InvalidConfigurationError(
                f"difficulty_weight must be within [0, 1], got {self.difficulty_weight}"
            )

    @property
    def spacing_range(self) -> int:
        return self.max_spacing - self.min_spacing
