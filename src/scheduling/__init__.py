"""
Scheduling Module - in-round reinsertion of missed cards.

Components:
- base: SchedulingStrategy interface and placeholder fallback
- smart_spaced: adaptive spacing with anti-clustering and progress ratio
- leitner_box: box-based intervals scaled by aggressiveness
- registry: key -> strategy lookup
"""

from src.scheduling.base import ISchedulingStrategy, SchedulingStrategy
from src.scheduling.leitner_box import LeitnerBoxScheduler
from src.scheduling.registry import (
    LEITNER_BOX,
    SMART_SPACED,
    SchedulerRegistry,
    StrategyInfo,
    default_registry,
)
from src.scheduling.smart_spaced import SmartSpacedScheduler

__all__ = [
    "ISchedulingStrategy",
    "SchedulingStrategy",
    "SmartSpacedScheduler",
    "LeitnerBoxScheduler",
    "SchedulerRegistry",
    "StrategyInfo",
    "default_registry",
    "SMART_SPACED",
    "LEITNER_BOX",
]
