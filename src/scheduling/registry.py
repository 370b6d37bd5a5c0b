"""
Scheduler registry: maps algorithm keys to strategy instances.

Each session owns its registry; `default_registry()` returns a fresh one
with the built-in strategies so registering a custom strategy never leaks
into other sessions.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from src.core.errors import UnknownStrategyError
from src.scheduling.base import ISchedulingStrategy
from src.scheduling.leitner_box import LeitnerBoxScheduler
from src.scheduling.smart_spaced import SmartSpacedScheduler

SMART_SPACED = "smart_spaced"
LEITNER_BOX = "leitner_box"


@dataclass(frozen=True)
class StrategyInfo:
    """Listing entry for settings screens and the CLI."""

    key: str
    name: str
    description: str


class SchedulerRegistry:
    """Lookup table from algorithm key to scheduling strategy."""

    def __init__(self, strategies: dict[str, ISchedulingStrategy] | None = None):
        self._strategies: dict[str, ISchedulingStrategy] = dict(strategies or {})

    def get(self, key: str) -> ISchedulingStrategy:
        """
        Get the strategy registered under `key`.

        Raises:
            UnknownStrategyError: If no strategy is registered for the key
        """
        try:
            return self._strategies[key]
        except KeyError:
            raise UnknownStrategyError(key, list(self._strategies)) from None

    def register(self, key: str, strategy: ISchedulingStrategy) -> None:
        """Register (or replace) a strategy."""
        if key in self._strategies:
            logger.info(f"Replacing scheduling strategy '{key}'")
        self._strategies[key] = strategy

    def keys(self) -> list[str]:
        return list(self._strategies)

    def available(self) -> list[StrategyInfo]:
        return [
            StrategyInfo(key=key, name=strategy.name, description=strategy.description)
            for key, strategy in self._strategies.items()
        ]

    def __contains__(self, key: object) -> bool:
        return key in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


def default_registry(smart_spaced: SmartSpacedScheduler | None = None) -> SchedulerRegistry:
    """
    Build a registry with the built-in strategies.

    Args:
        smart_spaced: Optional pre-configured Smart-Spaced instance
            (e.g. with a seeded random source)
    """
    return SchedulerRegistry(
        {
            SMART_SPACED: smart_spaced or SmartSpacedScheduler(),
            LEITNER_BOX: LeitnerBoxScheduler(),
        }
    )
