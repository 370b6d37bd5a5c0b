"""
Session state manager: applies answer events to a round.

For every answer the manager:
1. Moves the card between the correct/incorrect sets
2. Updates the streak counters
3. Delegates the mastery transition to the MasteryTracker
4. Reinserts pending missed cards into the rest of the queue using the
   active scheduling strategy; cards deferred by the progress ratio are
   offered again after every answer and appended once the queue runs out
5. Recomputes the live metrics

The manager is caller-owned: one instance per learner and deck, no
module-level state. With the built-in strategies the answer path never raises.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from src.core.formulas import seconds_between, utc_now
from src.core.models import Card, SchedulerConfig
from src.mastery.tracker import MasteryRecord, MasteryTracker
from src.scheduling.base import ISchedulingStrategy
from src.scheduling.registry import SMART_SPACED, SchedulerRegistry, default_registry
from src.session.history import SessionHistory, SessionResults
from src.session.missed import MissedCardTracker
from src.session.state import SessionSnapshot, SessionState


@dataclass(frozen=True)
class SessionMetrics:
    """Live numbers for the progress display."""

    correct_count: int = 0
    incorrect_count: int = 0
    current_streak: int = 0
    max_streak: int = 0
    progress_percentage: float = 0.0
    time_elapsed: float = 0.0  # seconds
    mastered_count: int = 0
    remaining_count: int = 0


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of applying one answer."""

    card_index: int
    is_correct: bool
    mastery_record: MasteryRecord | None
    is_mastered: bool
    rescheduled: bool
    upcoming: list[Card]
    metrics: SessionMetrics


class SessionStateManager:
    """
    Owns the round-scoped SessionState for one deck.

    Usage:
        manager = SessionStateManager("spanish-101", MasteryTracker())
        manager.start_round(cards)
        while not manager.is_round_complete:
            card = manager.current_card
            outcome = manager.record_answer(card.idx, is_correct=check(card))
        results = manager.complete_round()
    """

    def __init__(
        self,
        deck_id: str,
        tracker: MasteryTracker,
        registry: SchedulerRegistry | None = None,
        strategy_key: str = SMART_SPACED,
        config: SchedulerConfig | None = None,
        mastery_threshold: int | None = None,
        history: SessionHistory | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize manager.

        Args:
            deck_id: Deck this session studies
            tracker: Cross-round mastery tracker (shared across rounds)
            registry: Strategy registry (defaults to the built-ins)
            strategy_key: Active scheduling algorithm
            config: Scheduler configuration (defaults when omitted)
            mastery_threshold: Consecutive correct answers needed for mastery
            history: Where completed rounds are recorded
            clock: Returns the current time (injectable for tests)

        Raises:
            UnknownStrategyError: If strategy_key is not registered
            InvalidConfigurationError: If mastery_threshold is invalid
        """
        self.deck_id = deck_id
        self.tracker = tracker
        self.registry = registry or default_registry()
        self.config = config or SchedulerConfig()
        self.history = history
        self.clock = clock or utc_now

        self.strategy_key = strategy_key
        self.strategy: ISchedulingStrategy = self.registry.get(strategy_key)

        self.tracker.ensure_deck(deck_id, mastery_threshold=mastery_threshold)

        self.missed = MissedCardTracker(clock=self.clock)
        self._source_cards: list[Card] = []
        self.state = self._fresh_state([])

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def start_round(self, cards: Sequence[Card], total_cards: int | None = None) -> None:
        """
        Begin a new round with the given cards in order.

        Args:
            cards: Cards for this round
            total_cards: Deck size for mastery percentage (defaults to len(cards))
        """
        self._source_cards = list(cards)
        self.tracker.ensure_deck(
            self.deck_id,
            total_cards=total_cards if total_cards is not None else len(self._source_cards),
        )
        self.missed.clear()
        self.state = self._fresh_state(self._source_cards)
        logger.info(
            f"Started round for deck {self.deck_id}: {len(self._source_cards)} cards, "
            f"strategy {self.strategy_key}"
        )

    def reset_session(self) -> None:
        """Restart the current round from scratch. Deck mastery is kept."""
        self.missed.clear()
        self.state = self._fresh_state(self._source_cards)

    def complete_round(self) -> SessionResults:
        """Summarize the round and record it in the history."""
        now = self.clock()
        results = SessionResults(
            deck_id=self.deck_id,
            total_questions=self.state.answered_count,
            correct_answers=self.state.correct_answers,
            max_streak=self.state.max_streak,
            duration_seconds=seconds_between(self.state.start_time, now),
            completed_at=now,
        )
        if self.history is not None:
            self.history.add(results)
        logger.info(
            f"Completed round for deck {self.deck_id}: "
            f"{results.correct_answers}/{results.total_questions} correct, "
            f"best streak {results.max_streak}"
        )
        return results

    def change_strategy(self, strategy_key: str) -> None:
        """
        Switch scheduling algorithm for the rest of the round.

        Raises:
            UnknownStrategyError: If the key is not registered
        """
        self.strategy = self.registry.get(strategy_key)
        self.strategy_key = strategy_key
        logger.info(f"Deck {self.deck_id}: scheduling with {strategy_key}")

    def mark_response_start(self) -> None:
        """Call when a question is shown; response time is measured from here."""
        self.state.response_start_time = self.clock()

    # ------------------------------------------------------------------
    # Answer path
    # ------------------------------------------------------------------

    def record_answer(self, card_index: int, is_correct: bool) -> AnswerOutcome:
        """
        Apply an answer to a card in the queue.

        The answered card is consumed from the queue; normally it is the
        current card. Afterwards any missed cards not waiting in the queue
        are offered to the active strategy again, so a reinsertion
        deferred by the progress ratio is never lost. When the queue has
        run out, they are appended instead.
        """
        state = self.state
        now = self.clock()
        response_time_ms = int(seconds_between(state.response_start_time, now) * 1000)

        self._consume(card_index)
        state.answered_count += 1

        if is_correct:
            state.incorrect_cards.discard(card_index)
            state.correct_cards.add(card_index)
            state.current_streak += 1
            state.correct_answers += 1
        else:
            state.correct_cards.discard(card_index)
            state.incorrect_cards.add(card_index)
            state.current_streak = 0
        state.max_streak = max(state.max_streak, state.current_streak)

        record = self.tracker.record_attempt(self.deck_id, card_index, is_correct)

        if is_correct:
            if card_index not in self._queued_indices():
                self.missed.resolve(card_index)
        else:
            self.missed.track_miss(card_index, response_time_ms)

        if state.remaining:
            rescheduled = self._reschedule()
        else:
            # A miss on the final card ends the round without a repeat
            rescheduled = self._append_pending(exclude=card_index)

        state.response_start_time = now

        return AnswerOutcome(
            card_index=card_index,
            is_correct=is_correct,
            mastery_record=record,
            is_mastered=self.tracker.is_mastered(self.deck_id, card_index),
            rescheduled=rescheduled,
            upcoming=state.remaining,
            metrics=self.metrics(now),
        )

    def _consume(self, card_index: int) -> None:
        state = self.state
        if state.is_complete:
            return

        if state.round_cards[state.cursor].idx != card_index:
            position = next(
                (
                    i
                    for i in range(state.cursor + 1, len(state.round_cards))
                    if state.round_cards[i].idx == card_index
                ),
                None,
            )
            if position is None:
                logger.warning(
                    f"Deck {self.deck_id}: answer for card {card_index} which is not "
                    f"queued (current card {state.round_cards[state.cursor].idx})"
                )
                return
            logger.warning(
                f"Deck {self.deck_id}: answer for card {card_index} out of order "
                f"(current card {state.round_cards[state.cursor].idx})"
            )
            state.round_cards.insert(state.cursor, state.round_cards.pop(position))

        state.cursor += 1

    def _reschedule(self) -> bool:
        state = self.state
        remaining = state.remaining
        pending = self.missed.pending(exclude=self._queued_indices())
        if not pending:
            return False

        new_queue = self.strategy.schedule(
            pending, remaining, self.config, source_cards=self._source_cards
        )

        state.round_cards = state.round_cards[: state.cursor] + list(new_queue)
        logger.debug(
            f"Rescheduled {len(pending)} missed cards: "
            f"{len(remaining)} -> {len(new_queue)} remaining"
        )
        return True

    def _append_pending(self, exclude: int) -> bool:
        pending = self.missed.pending(exclude={exclude})
        if not pending:
            return False

        by_index = {card.idx: card for card in self._source_cards}
        self.state.round_cards.extend(
            by_index.get(m.card_index) or Card.placeholder(m.card_index) for m in pending
        )
        logger.info(
            f"Deck {self.deck_id}: queue ran out, appending deferred cards "
            f"{[m.card_index for m in pending]}"
        )
        return True

    def _queued_indices(self) -> set[int]:
        return {card.idx for card in self.state.remaining}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_card(self) -> Card | None:
        return self.state.current_card

    @property
    def upcoming(self) -> list[Card]:
        """Cards still to be answered, current card first."""
        return self.state.remaining

    @property
    def is_round_complete(self) -> bool:
        return self.state.is_complete

    def metrics(self, now: datetime | None = None) -> SessionMetrics:
        state = self.state
        if now is None:
            now = self.clock()

        total = len(state.round_cards)
        progress = min(100.0, state.answered_count / total * 100) if total else 0.0
        deck = self.tracker.get_deck(self.deck_id)

        return SessionMetrics(
            correct_count=len(state.correct_cards),
            incorrect_count=len(state.incorrect_cards),
            current_streak=state.current_streak,
            max_streak=state.max_streak,
            progress_percentage=progress,
            time_elapsed=seconds_between(state.start_time, now),
            mastered_count=deck.mastered_count if deck else 0,
            remaining_count=len(state.remaining),
        )

    # ------------------------------------------------------------------
    # Pause / resume
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        """Capture the round so it can be resumed later."""
        return SessionSnapshot.capture(
            self.state,
            strategy_key=self.strategy_key,
            source_cards=self._source_cards,
            missed_cards=self.missed.values(),
        )

    def restore(self, snapshot: SessionSnapshot) -> None:
        """
        Resume a paused round.

        Raises:
            UnknownStrategyError: If the snapshot's strategy is not registered
        """
        self.change_strategy(snapshot.strategy_key)
        self.deck_id = snapshot.deck_id
        self.tracker.ensure_deck(self.deck_id)
        self._source_cards = [card.to_card() for card in snapshot.source_cards]
        self.state = snapshot.to_state()
        self.missed.load(m.to_missed_card() for m in snapshot.missed_cards)
        logger.info(
            f"Resumed round for deck {self.deck_id} at card "
            f"{self.state.cursor}/{len(self.state.round_cards)}"
        )

    def _fresh_state(self, cards: list[Card]) -> SessionState:
        now = self.clock()
        return SessionState(
            deck_id=self.deck_id,
            round_cards=list(cards),
            start_time=now,
            response_start_time=now,
        )
