"""
Exceptions raised by the scheduling and mastery engine.

All errors derive from SchedulerError so callers can catch the family,
while the builtin bases keep `except KeyError` / `except ValueError` working.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for engine errors."""


class UnknownStrategyError(SchedulerError, KeyError):
    """Raised when a strategy key is not registered."""

    def __init__(self, key: str, available: list[str] | None = None):
        self.key = key
        self.available = sorted(available or [])
        super().__init__(key)

    def __str__(self) -> str:
        message = f"Unknown scheduling algorithm: {self.key}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        return message


class InvalidConfigurationError(SchedulerError, ValueError):
    """Raised when scheduler or mastery configuration is invalid."""


class MasteryDataError(SchedulerError, ValueError):
    """Raised when persisted mastery data cannot be decoded."""


class SessionSnapshotError(SchedulerError, ValueError):
    """Raised when a paused session snapshot cannot be decoded."""
