"""
Unit tests for the Leitner Box strategy.
"""

import pytest

from src.core.models import Aggressiveness, Card, MissedCard, SchedulerConfig
from src.scheduling.leitner_box import LeitnerBoxScheduler


@pytest.fixture
def scheduler():
    return LeitnerBoxScheduler()


def positions_of(queue, index):
    return [i for i, card in enumerate(queue) if card.idx == index]


class TestBoxes:
    @pytest.mark.parametrize(
        "miss_count,box",
        [(0, 5), (1, 4), (2, 3), (3, 2), (4, 1), (5, 0), (9, 0)],
    )
    def test_more_misses_lower_box(self, scheduler, miss_count, box):
        assert scheduler.box_level(MissedCard(card_index=1, miss_count=miss_count)) == box

    @pytest.mark.parametrize(
        "box,interval",
        [(0, 2), (1, 4), (2, 8), (3, 16), (4, 32), (5, 32)],
    )
    def test_balanced_intervals(self, scheduler, config, box, interval):
        assert scheduler.get_box_interval(box, config) == interval

    @pytest.mark.parametrize(
        "aggressiveness,interval",
        [
            (Aggressiveness.GENTLE, 3),
            (Aggressiveness.BALANCED, 2),
            (Aggressiveness.INTENSIVE, 1),
        ],
    )
    def test_aggressiveness_scales_interval(self, scheduler, aggressiveness, interval):
        config = SchedulerConfig(aggressiveness=aggressiveness)
        assert scheduler.get_box_interval(0, config) == interval

    def test_groups_keep_first_appearance_order(self, scheduler):
        missed_cards = [
            MissedCard(card_index=1, miss_count=5),
            MissedCard(card_index=2, miss_count=1),
            MissedCard(card_index=3, miss_count=5),
        ]
        groups = scheduler.group_by_box(missed_cards)
        assert list(groups) == [0, 4]
        assert [m.card_index for m in groups[0]] == [1, 3]


class TestSchedule:
    def test_heavily_missed_card_returns_at_interval(self, scheduler, cards, config, card_factory):
        result = scheduler.schedule(
            [MissedCard(card_index=100, miss_count=5)],
            cards,
            config,
            source_cards=card_factory(1, start=100),
        )
        assert len(result) == 21
        assert positions_of(result, 100) == [2]

    def test_same_box_cards_spaced_by_min_spacing(self, scheduler, cards, config, card_factory):
        missed_cards = [
            MissedCard(card_index=100, miss_count=5),
            MissedCard(card_index=101, miss_count=6),
        ]
        result = scheduler.schedule(missed_cards, cards, config, source_cards=card_factory(2, start=100))

        assert positions_of(result, 100) == [2]
        assert positions_of(result, 101) == [4]

    def test_rarely_missed_card_goes_to_end(self, scheduler, cards, config, card_factory):
        result = scheduler.schedule(
            [MissedCard(card_index=100, miss_count=1)],
            cards,
            config,
            source_cards=card_factory(1, start=100),
        )
        assert positions_of(result, 100) == [20]

    def test_intensive_pulls_earlier_than_gentle(self, scheduler, cards, card_factory):
        missed_cards = [MissedCard(card_index=100, miss_count=3)]
        source = card_factory(1, start=100)

        gentle = scheduler.schedule(
            missed_cards, cards, SchedulerConfig(aggressiveness="gentle"), source_cards=source
        )
        intensive = scheduler.schedule(
            missed_cards, cards, SchedulerConfig(aggressiveness="intensive"), source_cards=source
        )

        # box 2: 8 × 1.5 = 12 vs 8 × 0.5 = 4
        assert positions_of(gentle, 100) == [12]
        assert positions_of(intensive, 100) == [4]

    def test_positions_never_exceed_queue_length(self, scheduler, card_factory, config):
        upcoming = card_factory(3)
        missed_cards = [MissedCard(card_index=100 + i, miss_count=i) for i in range(6)]

        result = scheduler.schedule(missed_cards, upcoming, config, source_cards=card_factory(6, start=100))

        assert len(result) == 9
        assert [c.idx for c in result if c.idx < 100] == [0, 1, 2]

    def test_empty_inputs(self, scheduler, config):
        assert scheduler.schedule([], [], config) == []

    def test_missing_card_becomes_placeholder(self, scheduler, cards, config):
        result = scheduler.schedule([MissedCard(card_index=77, miss_count=5)], cards, config)

        assert result[2] == Card.placeholder(77)
        assert scheduler.placeholder_count == 1

    def test_deterministic(self, scheduler, cards, config):
        missed_cards = [MissedCard(card_index=i, miss_count=i % 6) for i in range(0, 20, 3)]
        assert scheduler.schedule(missed_cards, cards, config) == scheduler.schedule(
            missed_cards, cards, config
        )
