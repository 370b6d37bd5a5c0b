"""
Leitner Box System.

Classic box-based spacing adapted to a single round: every miss drops a
card one box, and lower boxes use shorter reinsertion intervals.

    misses:    0   1   2   3   4   5+
    box:       5*  4   3   2   1   0
    interval: 32  32  16   8   4   2      (* capped to the last box)

Intervals are scaled by aggressiveness (gentle ×1.5, balanced ×1.0,
intensive ×0.5).
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from src.core.formulas import round_half_up
from src.core.models import Card, MissedCard, SchedulerConfig
from src.scheduling.base import SchedulingStrategy


class LeitnerBoxScheduler(SchedulingStrategy):
    """Classic spaced repetition with exponential intervals."""

    name = "Leitner Box System"
    description = "Classic spaced repetition with exponential intervals"

    BOX_INTERVALS = (2, 4, 8, 16, 32)

    def schedule(
        self,
        missed_cards: Sequence[MissedCard],
        upcoming: Sequence[Card],
        config: SchedulerConfig,
        source_cards: Sequence[Card] | None = None,
    ) -> list[Card]:
        result = list(upcoming)

        for box_level, group in self.group_by_box(missed_cards).items():
            interval = self.get_box_interval(box_level, config)

            for i, missed in enumerate(group):
                position = min(interval + i * config.min_spacing, len(result))
                result.insert(position, self.resolve_card(missed, upcoming, source_cards))

            logger.debug(
                f"Leitner box {box_level}: {len(group)} cards from interval {interval}"
            )

        return result

    def box_level(self, missed: MissedCard) -> int:
        """More misses means a lower box."""
        return max(0, len(self.BOX_INTERVALS) - missed.miss_count)

    def group_by_box(self, missed_cards: Sequence[MissedCard]) -> dict[int, list[MissedCard]]:
        """Group cards by box, preserving first-appearance order of boxes."""
        groups: dict[int, list[MissedCard]] = {}
        for missed in missed_cards:
            groups.setdefault(self.box_level(missed), []).append(missed)
        return groups

    def get_box_interval(self, box_level: int, config: SchedulerConfig) -> int:
        base_interval = self.BOX_INTERVALS[min(box_level, len(self.BOX_INTERVALS) - 1)]
        return round_half_up(base_interval * config.aggressiveness.multiplier)
