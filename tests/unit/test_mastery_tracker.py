"""
Unit tests for MasteryTracker transitions and queries.
"""

import pytest

from src.core.errors import InvalidConfigurationError
from src.mastery.tracker import DeckMastery, MasteryRecord, MasteryTracker

DECK = "spanish-101"


@pytest.fixture
def tracker(clock):
    tracker = MasteryTracker(clock=clock)
    tracker.ensure_deck(DECK, total_cards=10, mastery_threshold=3)
    return tracker


def answer(tracker, card_index, *outcomes):
    for is_correct in outcomes:
        tracker.record_attempt(DECK, card_index, is_correct)


class TestPromotion:
    def test_three_correct_masters_card(self, tracker):
        answer(tracker, 7, True, True)
        assert tracker.is_mastered(DECK, 7) is False

        answer(tracker, 7, True)
        assert tracker.is_mastered(DECK, 7) is True

    @pytest.mark.parametrize("threshold", [1, 2, 5])
    def test_mastered_exactly_on_threshold(self, clock, threshold):
        tracker = MasteryTracker(clock=clock)
        tracker.ensure_deck(DECK, total_cards=5, mastery_threshold=threshold)

        for attempt in range(1, threshold + 1):
            tracker.record_attempt(DECK, 0, True)
            assert tracker.is_mastered(DECK, 0) is (attempt == threshold)

    def test_mastered_at_stamped_on_crossing(self, tracker, clock):
        answer(tracker, 7, True, True)
        assert tracker.get_record(DECK, 7).mastered_at is None

        crossing_time = clock.advance(30)
        answer(tracker, 7, True)
        clock.advance(30)
        answer(tracker, 7, True)

        record = tracker.get_record(DECK, 7)
        assert record.mastered_at == crossing_time
        assert record.consecutive_correct == 4

    def test_attempt_count_counts_every_answer(self, tracker):
        answer(tracker, 2, True, False, True, True)
        record = tracker.get_record(DECK, 2)
        assert record.attempt_count == 4
        assert record.consecutive_correct == 2


class TestDemotion:
    def test_miss_demotes_mastered_card(self, tracker):
        answer(tracker, 7, True, True, True)
        assert tracker.record_attempt(DECK, 7, False) is None

        assert tracker.is_mastered(DECK, 7) is False
        assert tracker.get_record(DECK, 7) is None

    def test_single_correct_after_demotion_does_not_remaster(self, tracker):
        answer(tracker, 7, True, True, True, False)

        answer(tracker, 7, True)
        assert tracker.is_mastered(DECK, 7) is False
        assert tracker.get_record(DECK, 7).consecutive_correct == 1

        answer(tracker, 7, True, True)
        assert tracker.is_mastered(DECK, 7) is True

    def test_miss_while_learning_resets_streak(self, tracker):
        answer(tracker, 4, True, True, False)

        record = tracker.get_record(DECK, 4)
        assert record is not None
        assert record.consecutive_correct == 0
        assert record.attempt_count == 3

    def test_first_answer_wrong_creates_learning_record(self, tracker, clock):
        record = tracker.record_attempt(DECK, 9, False)

        assert record == MasteryRecord(
            card_index=9, consecutive_correct=0, attempt_count=1, last_seen=clock()
        )


class TestQueries:
    def test_mastered_cards_only_above_threshold(self, tracker):
        answer(tracker, 5, True, True, True)
        answer(tracker, 1, True, True, True)
        answer(tracker, 3, True)

        assert tracker.get_mastered_cards(DECK) == [1, 5]

    @pytest.mark.parametrize(
        "total,mastered,expected",
        [(10, 0, 0), (3, 1, 33), (3, 2, 67), (8, 1, 13), (4, 4, 100)],
    )
    def test_mastery_percentage_rounded(self, clock, total, mastered, expected):
        tracker = MasteryTracker(default_threshold=1, clock=clock)
        tracker.ensure_deck(DECK, total_cards=total)
        for index in range(mastered):
            tracker.record_attempt(DECK, index, True)

        assert tracker.get_mastery_percentage(DECK) == expected

    def test_unknown_deck(self, tracker):
        assert tracker.is_mastered("other", 1) is False
        assert tracker.get_mastered_cards("other") == []
        assert tracker.get_mastery_percentage("other") == 0
        assert tracker.get_record("other", 1) is None

    def test_empty_deck_percentage(self, clock):
        tracker = MasteryTracker(clock=clock)
        tracker.ensure_deck(DECK, total_cards=0)
        assert tracker.get_mastery_percentage(DECK) == 0


class TestDeckLifecycle:
    def test_reset_clears_deck(self, tracker):
        answer(tracker, 1, True, True, True)
        tracker.reset_deck_mastery(DECK)

        assert tracker.get_deck(DECK) is None
        assert tracker.get_mastered_cards(DECK) == []

    def test_reset_other_deck_untouched(self, tracker):
        tracker.ensure_deck("french", total_cards=5)
        answer(tracker, 1, True, True, True)
        tracker.reset_deck_mastery("french")

        assert tracker.is_mastered(DECK, 1) is True

    def test_ensure_deck_updates_existing(self, tracker):
        deck = tracker.ensure_deck(DECK, total_cards=40, mastery_threshold=5)
        assert deck.total_cards == 40
        assert deck.mastery_threshold == 5
        assert tracker.ensure_deck(DECK) is deck

    def test_deck_created_on_first_attempt(self, clock):
        tracker = MasteryTracker(default_threshold=2, clock=clock)
        tracker.record_attempt("new-deck", 0, True)
        assert tracker.get_deck("new-deck").mastery_threshold == 2

    @pytest.mark.parametrize("threshold", [0, -1])
    def test_invalid_threshold(self, clock, threshold):
        with pytest.raises(InvalidConfigurationError):
            MasteryTracker(default_threshold=threshold, clock=clock)
        with pytest.raises(InvalidConfigurationError):
            MasteryTracker(clock=clock).ensure_deck(DECK, mastery_threshold=threshold)
        with pytest.raises(InvalidConfigurationError):
            DeckMastery(deck_id=DECK, mastery_threshold=threshold)

    def test_mark_and_unmark_mastered(self, tracker):
        record = tracker.mark_mastered(DECK, 6)
        assert record.consecutive_correct == 3
        assert record.mastered_at is not None
        assert tracker.is_mastered(DECK, 6) is True

        tracker.unmark_mastered(DECK, 6)
        assert tracker.is_mastered(DECK, 6) is False
        assert tracker.get_record(DECK, 6) is None

    def test_load_deck_replaces_state(self, tracker):
        restored = DeckMastery(
            deck_id=DECK,
            mastered_cards={2: MasteryRecord(card_index=2, consecutive_correct=3, attempt_count=3)},
            total_cards=10,
            mastery_threshold=3,
        )
        tracker.load_deck(restored)

        assert tracker.get_mastered_cards(DECK) == [2]
        assert list(tracker.decks()) == [restored]
