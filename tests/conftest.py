"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone

from strider_app.tracking.models import Coordinate
from strider_app.tracking.sources import ManualPositionSource, ManualTicker
from strider_app.tracking.tracker import RunTracker


class FakeClock:
    """Clock advanced explicitly by tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 6, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def position_source() -> ManualPositionSource:
    return ManualPositionSource()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def tracker(position_source, ticker, clock) -> RunTracker:
    return RunTracker(position_source, ticker, clock=clock)


@pytest.fixture
def closed_loop_path() -> list[Coordinate]:
    """Scenario A: returns to within a few meters of the start."""
    return [Coordinate(0.0, 0.0), Coordinate(0.0, 0.0005), Coordinate(0.0, 0.00003)]


@pytest.fixture
def open_path() -> list[Coordinate]:
    """Scenario B: ends well over a kilometer from the start."""
    return [
        Coordinate(28.6139, 77.2090),
        Coordinate(28.6200, 77.2200),
        Coordinate(28.6300, 77.2300),
    ]


@pytest.fixture
def city_loop_path() -> list[Coordinate]:
    """A small loop around a block, starting at a full-precision coordinate."""
    return [
        Coordinate(28.61390123, 77.20900456),
        Coordinate(28.6150, 77.2090),
        Coordinate(28.6150, 77.2105),
        Coordinate(28.6139, 77.2105),
        Coordinate(28.61392, 77.20902),
    ]
