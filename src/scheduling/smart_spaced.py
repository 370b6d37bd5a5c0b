"""
Smart Spaced Reinforcement.

Reinserts missed cards at a position driven by three signals:
- difficulty: harder cards come back sooner
- miss count: repeatedly missed cards come back sooner (capped at 3 misses)
- recency: cards seen in the last minute are pushed slightly later

Placement then runs two corrective passes:
1. Anti-clustering: never more than `cluster_limit` reinserted cards in a
   row while new material remains to separate them
2. Progress ratio: if reinsertions would starve new material, re-lay them
   at an even spacing and defer the overflow to the next scheduling call
"""

from __future__ import annotations

import math
import random
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from loguru import logger

from src.core.formulas import utc_now
from src.core.models import Card, MissedCard, SchedulerConfig
from src.scheduling.base import SchedulingStrategy

# Tolerance for float error when sizing the reinsertion budget
_RATIO_EPSILON = 1e-9


class _Slot(NamedTuple):
    card: Card
    reinserted: bool


@dataclass
class _Candidate:
    missed: MissedCard
    position: int


class SmartSpacedScheduler(SchedulingStrategy):
    """Adaptive spacing based on performance with anti-clustering."""

    name = "Smart Spaced Reinforcement"
    description = "Adaptive spacing based on performance with anti-clustering"

    ATTEMPT_CAP = 3  # Misses after which spacing collapses to the minimum
    RECENCY_WINDOW_SECONDS = 60.0
    MIN_TIME_FACTOR = 0.5

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize scheduler.

        Args:
            rng: Random source for position jitter (seed it for reproducible queues)
            clock: Returns the current time, used for the recency factor
        """
        super().__init__()
        self.rng = rng or random.Random()
        self.clock = clock or utc_now

    def schedule(
        self,
        missed_cards: Sequence[MissedCard],
        upcoming: Sequence[Card],
        config: SchedulerConfig,
        source_cards: Sequence[Card] | None = None,
    ) -> list[Card]:
        upcoming = list(upcoming)
        if not missed_cards:
            return upcoming

        now = self.clock()
        candidates = [
            _Candidate(missed, self.calculate_position(missed, len(upcoming), config, now))
            for missed in missed_cards
        ]
        # Hardest first; sort is stable so ties keep input order
        candidates.sort(key=lambda c: -c.missed.difficulty)

        slots = self._merge_with_anti_clustering(candidates, upcoming, config, source_cards)
        slots = self._enforce_cluster_limit(slots, config.cluster_limit)

        if upcoming and len(upcoming) / len(slots) < config.progress_ratio:
            slots = self._redistribute_for_progress(slots, config)

        logger.debug(
            f"Smart spaced: {len(missed_cards)} missed into {len(upcoming)} upcoming "
            f"-> {len(slots)} cards"
        )
        return [slot.card for slot in slots]

    def calculate_position(
        self,
        missed: MissedCard,
        queue_size: int,
        config: SchedulerConfig,
        now: datetime | None = None,
    ) -> int:
        """
        Calculate the target insertion index for a missed card.

        Formula:
            spacing = min + floor(range × (1 - difficulty × weight)
                                  × (1 - min(1, misses / 3))
                                  × max(0.5, min(1, seconds_since_seen / 60)))

        A ±1 jitter is added, then the result is clamped to
        [min_spacing, queue_size - 1]; the lower bound wins for short queues.
        """
        if now is None:
            now = self.clock()

        base = config.min_spacing
        difficulty = min(1.0, max(0.0, missed.difficulty))

        difficulty_factor = 1 - difficulty * config.difficulty_weight
        attempt_factor = min(1.0, max(0, missed.miss_count) / self.ATTEMPT_CAP)
        time_factor = min(1.0, missed.seconds_since_seen(now) / self.RECENCY_WINDOW_SECONDS)

        spacing = base + math.floor(
            config.spacing_range
            * difficulty_factor
            * (1 - attempt_factor)
            * max(self.MIN_TIME_FACTOR, time_factor)
        )
        jitter = self.rng.randint(-1, 1)

        return max(base, min(queue_size - 1, spacing + jitter))

    def _merge_with_anti_clustering(
        self,
        candidates: list[_Candidate],
        upcoming: list[Card],
        config: SchedulerConfig,
        source_cards: Sequence[Card] | None,
    ) -> list[_Slot]:
        result = [_Slot(card, False) for card in upcoming]
        used_positions: set[int] = set()
        consecutive_missed = 0
        step = max(1, config.min_spacing)

        for candidate in candidates:
            position = candidate.position

            if consecutive_missed >= config.cluster_limit:
                position += config.cluster_limit
                consecutive_missed = 0

            while position in used_positions:
                position += step

            position = min(position, len(result))
            card = self.resolve_card(candidate.missed, upcoming, source_cards)
            result.insert(position, _Slot(card, True))
            used_positions.add(position)
            consecutive_missed += 1

        return result

    @classmethod
    def _enforce_cluster_limit(cls, slots: list[_Slot], limit: int) -> list[_Slot]:
        """
        Split runs of reinserted cards longer than `limit`.

        Overflow cards are held back until the next new card has been
        placed, so reinserted cards move later. If the tail of the queue
        is still crowded, the same pass runs over the reversed queue and
        pulls the overflow into earlier gaps.
        """
        result, overflow = cls._push_runs_later(slots, limit)
        if overflow:
            reversed_result, overflow = cls._push_runs_later(result[::-1], limit)
            result = reversed_result[::-1]
            if overflow:
                logger.debug(
                    f"Anti-clustering: not enough new cards to separate "
                    f"{sum(s.reinserted for s in slots)} reinserted cards"
                )
        return result

    @staticmethod
    def _push_runs_later(slots: list[_Slot], limit: int) -> tuple[list[_Slot], bool]:
        result: list[_Slot] = []
        held: deque[_Slot] = deque()
        run = 0

        for slot in slots:
            if not slot.reinserted:
                result.append(slot)
                run = 0
                while held and run < limit:
                    result.append(held.popleft())
                    run += 1
            elif run < limit and not held:
                result.append(slot)
                run += 1
            else:
                held.append(slot)

        overflow = bool(held)
        result.extend(held)
        return result, overflow

    def _redistribute_for_progress(
        self,
        slots: list[_Slot],
        config: SchedulerConfig,
    ) -> list[_Slot]:
        originals = [slot for slot in slots if not slot.reinserted]
        reinserted = [slot for slot in slots if slot.reinserted]

        ratio = config.progress_ratio
        budget = math.floor(len(originals) * (1 - ratio) / ratio + _RATIO_EPSILON)
        kept = reinserted[:budget]
        if len(kept) < len(reinserted):
            deferred = [slot.card.idx for slot in reinserted[budget:]]
            logger.warning(
                f"Progress ratio {ratio:.0%}: deferring {len(deferred)} reinsertions "
                f"{deferred} to keep new material flowing"
            )

        if not kept:
            return originals

        result = list(originals)
        spacing = max(1, (len(originals) + len(kept)) // len(kept))
        insert_at = max(spacing, config.min_spacing)
        for slot in kept:
            result.insert(min(insert_at, len(result)), slot)
            insert_at += spacing

        return self._enforce_cluster_limit(result, config.cluster_limit)
