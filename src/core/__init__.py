"""
Core Module - Shared domain types and errors.

Components:
- models: Card, MissedCard, SchedulerConfig, Aggressiveness
- errors: SchedulerError hierarchy
- formulas: difficulty and rounding helpers

Design Principle:
Scheduling, mastery and session modules import shared concepts from
src/core/ rather than redefining them.
"""

from src.core.errors import (
    InvalidConfigurationError,
    MasteryDataError,
    SchedulerError,
    SessionSnapshotError,
    UnknownStrategyError,
)
from src.core.models import Aggressiveness, Card, MissedCard, SchedulerConfig

__all__ = [
    # Models
    "Card",
    "MissedCard",
    "SchedulerConfig",
    "Aggressiveness",
    # Errors
    "SchedulerError",
    "UnknownStrategyError",
    "InvalidConfigurationError",
    "MasteryDataError",
    "SessionSnapshotError",
]
