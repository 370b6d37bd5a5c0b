"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.models import Card, SchedulerConfig  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Deterministic clock; call it for the time, advance it manually."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 15, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def make_cards(count: int, start: int = 0) -> list[Card]:
    return [
        Card(idx=i, name=f"Card {i}", side_a=f"front {i}", side_b=f"back {i}")
        for i in range(start, start + count)
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cards():
    """Twenty cards with indices 0-19."""
    return make_cards(20)


@pytest.fixture
def config():
    """The default learn-mode scheduler configuration."""
    return SchedulerConfig(
        min_spacing=2,
        max_spacing=8,
        cluster_limit=2,
        progress_ratio=0.3,
        difficulty_weight=0.5,
    )


@pytest.fixture
def card_factory():
    """Build `count` cards starting at index `start`."""
    return make_cards
