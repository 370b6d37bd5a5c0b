"""
Unit tests for the scheduler registry and scheduler configuration.
"""

import pytest

from src.core.errors import InvalidConfigurationError, SchedulerError, UnknownStrategyError
from src.core.models import Aggressiveness, Card, SchedulerConfig
from src.scheduling.leitner_box import LeitnerBoxScheduler
from src.scheduling.registry import (
    LEITNER_BOX,
    SMART_SPACED,
    SchedulerRegistry,
    default_registry,
)
from src.scheduling.smart_spaced import SmartSpacedScheduler


class ReverseScheduler:
    """Custom strategy: missed cards first, then the queue reversed."""

    name = "Reverse"
    description = "Test strategy"

    def schedule(self, missed_cards, upcoming, config, source_cards=None):
        return [Card.placeholder(m.card_index) for m in missed_cards] + list(reversed(upcoming))


class TestSchedulerRegistry:
    def test_builtins_registered(self):
        registry = default_registry()
        assert registry.keys() == [SMART_SPACED, LEITNER_BOX]
        assert isinstance(registry.get("smart_spaced"), SmartSpacedScheduler)
        assert isinstance(registry.get("leitner_box"), LeitnerBoxScheduler)

    def test_unknown_key_raises(self):
        registry = default_registry()
        with pytest.raises(UnknownStrategyError) as exc_info:
            registry.get("nonexistent")

        assert exc_info.value.key == "nonexistent"
        assert "nonexistent" in str(exc_info.value)
        assert "smart_spaced" in str(exc_info.value)

    def test_unknown_key_is_a_key_error(self):
        with pytest.raises(KeyError):
            default_registry().get("nonexistent")
        with pytest.raises(SchedulerError):
            default_registry().get("nonexistent")

    def test_register_custom_strategy(self, cards, config):
        registry = default_registry()
        registry.register("reverse", ReverseScheduler())

        assert "reverse" in registry
        assert len(registry) == 3
        result = registry.get("reverse").schedule([], cards, config)
        assert result[0].idx == 19

    def test_registries_are_independent(self):
        first = default_registry()
        second = default_registry()
        first.register("reverse", ReverseScheduler())

        assert "reverse" not in second

    def test_available_lists_names(self):
        infos = {info.key: info for info in default_registry().available()}
        assert infos["smart_spaced"].name == "Smart Spaced Reinforcement"
        assert infos["leitner_box"].name == "Leitner Box System"
        assert infos["leitner_box"].description

    def test_default_registry_accepts_configured_smart_spaced(self):
        smart = SmartSpacedScheduler()
        assert default_registry(smart).get(SMART_SPACED) is smart

    def test_empty_registry(self):
        with pytest.raises(UnknownStrategyError):
            SchedulerRegistry().get(SMART_SPACED)


class TestSchedulerConfig:
    def test_defaults(self):
        config = SchedulerConfig()
        assert config.min_spacing == 2
        assert config.max_spacing == 8
        assert config.cluster_limit == 2
        assert config.progress_ratio == 0.3
        assert config.difficulty_weight == 0.5
        assert config.aggressiveness is Aggressiveness.BALANCED
        assert config.spacing_range == 6

    def test_aggressiveness_string_coerced(self):
        assert SchedulerConfig(aggressiveness="intensive").aggressiveness is Aggressiveness.INTENSIVE

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_spacing": 5, "max_spacing": 4},
            {"min_spacing": -1},
            {"cluster_limit": 0},
            {"progress_ratio": -0.1},
            {"progress_ratio": 1.5},
            {"difficulty_weight": 2.0},
            {"aggressiveness": "reckless"},
        ],
    )
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            SchedulerConfig(**kwargs)

    def test_invalid_config_is_value_error(self):
        with pytest.raises(ValueError):
            SchedulerConfig(max_spacing=0)

    def test_immutable(self):
        config = SchedulerConfig()
        with pytest.raises(AttributeError):
            config.min_spacing = 4

    def test_equal_spacing_allowed(self):
        assert SchedulerConfig(min_spacing=3, max_spacing=3).spacing_range == 0
