"""
Per-card mastery tracking.

State machine per (deck_id, card_index):

    Learning --(consecutive_correct reaches threshold)--> Mastered
    Learning --(incorrect)--> Learning, consecutive_correct = 0
    Mastered --(incorrect)--> record deleted; mastery must be re-earned

Mastery state lives in `DeckMastery` objects owned by the tracker
instance. Everything is recomputable from the persisted records, so a
tracker rehydrated with `load_deck()` behaves exactly like one that ran
continuously.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from src.core.errors import InvalidConfigurationError
from src.core.formulas import round_half_up, utc_now

DEFAULT_MASTERY_THRESHOLD = 3


@dataclass
class MasteryRecord:
    """Attempt history for one card."""

    card_index: int
    consecutive_correct: int = 0
    attempt_count: int = 0
    last_seen: datetime | None = None
    mastered_at: datetime | None = None


@dataclass
class DeckMastery:
    """All mastery records for one deck."""

    deck_id: str
    mastered_cards: dict[int, MasteryRecord] = field(default_factory=dict)
    total_cards: int = 0
    mastery_threshold: int = DEFAULT_MASTERY_THRESHOLD
    last_updated: datetime | None = None

    def __post_init__(self):
        validate_threshold(self.mastery_threshold)

    def is_record_mastered(self, record: MasteryRecord) -> bool:
        return record.consecutive_correct >= self.mastery_threshold

    def mastered_indices(self) -> list[int]:
        return sorted(
            index
            for index, record in self.mastered_cards.items()
            if self.is_record_mastered(record)
        )

    @property
    def mastered_count(self) -> int:
        return len(self.mastered_indices())

    @property
    def mastery_percentage(self) -> int:
        """Mastered share of the deck, 0-100."""
        if self.total_cards <= 0:
            return 0
        return round_half_up(self.mastered_count / self.total_cards * 100)


def validate_threshold(threshold: int) -> int:
    if not isinstance(threshold, int) or isinstance(threshold, bool) or threshold < 1:
        raise InvalidConfigurationError(
            f"mastery_threshold must be a positive integer, got {threshold!r}"
        )
    return threshold


class MasteryTracker:
    """
    Track consecutive-correct mastery per deck.

    Usage:
        tracker = MasteryTracker()
        tracker.ensure_deck("spanish-101", total_cards=40, mastery_threshold=3)
        tracker.record_attempt("spanish-101", 7, is_correct=True)
        tracker.is_mastered("spanish-101", 7)
    """

    def __init__(
        self,
        default_threshold: int = DEFAULT_MASTERY_THRESHOLD,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize tracker.

        Args:
            default_threshold: Threshold for decks created without one
            clock: Returns the current time (injectable for tests)
        """
        self.default_threshold = validate_threshold(default_threshold)
        self.clock = clock or utc_now
        self._decks: dict[str, DeckMastery] = {}

    # ------------------------------------------------------------------
    # Deck lifecycle
    # ------------------------------------------------------------------

    def ensure_deck(
        self,
        deck_id: str,
        total_cards: int | None = None,
        mastery_threshold: int | None = None,
    ) -> DeckMastery:
        """
        Get the deck's mastery, creating it if needed.

        `total_cards` and `mastery_threshold` update an existing deck when given.
        """
        if mastery_threshold is not None:
            validate_threshold(mastery_threshold)

        deck = self._decks.get(deck_id)
        if deck is None:
            deck = DeckMastery(
                deck_id=deck_id,
                total_cards=total_cards or 0,
                mastery_threshold=mastery_threshold or self.default_threshold,
                last_updated=self.clock(),
            )
            self._decks[deck_id] = deck
            return deck

        if total_cards is not None:
            deck.total_cards = total_cards
        if mastery_threshold is not None:
            deck.mastery_threshold = mastery_threshold
        return deck

    def load_deck(self, deck: DeckMastery) -> None:
        """Rehydrate a deck from persisted state, replacing any in-memory copy."""
        self._decks[deck.deck_id] = deck
        logger.debug(
            f"Loaded mastery for deck {deck.deck_id}: "
            f"{len(deck.mastered_cards)} records, threshold {deck.mastery_threshold}"
        )

    def get_deck(self, deck_id: str) -> DeckMastery | None:
        return self._decks.get(deck_id)

    def decks(self) -> Iterator[DeckMastery]:
        return iter(self._decks.values())

    def reset_deck_mastery(self, deck_id: str) -> None:
        """Forget all mastery for a deck."""
        if self._decks.pop(deck_id, None) is not None:
            logger.info(f"Reset mastery for deck {deck_id}")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def record_attempt(
        self,
        deck_id: str,
        card_index: int,
        is_correct: bool,
    ) -> MasteryRecord | None:
        """
        Apply one answer to a card's mastery state.

        Returns:
            The updated record, or None when a mastered card was demoted
            (its record is deleted)
        """
        deck = self.ensure_deck(deck_id)
        now = self.clock()
        deck.last_updated = now
        record = deck.mastered_cards.get(card_index)

        if is_correct:
            if record is None:
                record = MasteryRecord(card_index=card_index)
                deck.mastered_cards[card_index] = record
            was_mastered = deck.is_record_mastered(record)
            record.consecutive_correct += 1
            record.attempt_count += 1
            record.last_seen = now
            if deck.is_record_mastered(record) and not was_mastered:
                if record.mastered_at is None:
                    record.mastered_at = now
                logger.debug(f"Deck {deck_id}: card {card_index} mastered")
            return record

        if record is not None and deck.is_record_mastered(record):
            del deck.mastered_cards[card_index]
            logger.debug(f"Deck {deck_id}: card {card_index} lost mastery")
            return None

        if record is None:
            record = MasteryRecord(card_index=card_index)
            deck.mastered_cards[card_index] = record
        record.consecutive_correct = 0
        record.attempt_count += 1
        record.last_seen = now
        return record

    def mark_mastered(self, deck_id: str, card_index: int) -> MasteryRecord:
        """Force a card into the mastered state."""
        deck = self.ensure_deck(deck_id)
        now = self.clock()
        existing = deck.mastered_cards.get(card_index)
        record = MasteryRecord(
            card_index=card_index,
            consecutive_correct=max(
                deck.mastery_threshold, existing.consecutive_correct if existing else 0
            ),
            attempt_count=existing.attempt_count + 1 if existing else 1,
            last_seen=now,
            mastered_at=(existing.mastered_at if existing else None) or now,
        )
        deck.mastered_cards[card_index] = record
        deck.last_updated = now
        return record

    def unmark_mastered(self, deck_id: str, card_index: int) -> None:
        """Remove a card's record entirely."""
        deck = self._decks.get(deck_id)
        if deck is None:
            return
        if deck.mastered_cards.pop(card_index, None) is not None:
            deck.last_updated = self.clock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_record(self, deck_id: str, card_index: int) -> MasteryRecord | None:
        deck = self._decks.get(deck_id)
        if deck is None:
            return None
        return deck.mastered_cards.get(card_index)

    def is_mastered(self, deck_id: str, card_index: int) -> bool:
        deck = self._decks.get(deck_id)
        if deck is None:
            return False
        record = deck.mastered_cards.get(card_index)
        return record is not None and deck.is_record_mastered(record)

    def get_mastered_cards(self, deck_id: str) -> list[int]:
        deck = self._decks.get(deck_id)
        if deck is None:
            return []
        return deck.mastered_indices()

    def get_mastery_percentage(self, deck_id: str) -> int:
        deck = self._decks.get(deck_id)
        if deck is None:
            return 0
        return deck.mastery_percentage
