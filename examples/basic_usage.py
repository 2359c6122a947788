#!/usr/bin/env python3
"""
Basic Usage Example - Strider Loop Run Tracker

This script demonstrates the basic usage of the Strider run tracker with a
simulated position stream. It shows how to:
- Initialize the app with a position source and ticker
- Connect a submitter identity
- Start, sample and stop a run
- Watch snapshots and submit the finished loop

Run: python examples/basic_usage.py
"""

from datetime import datetime, timedelta, timezone
from typing import List

from strider_app.app import StriderApp
from strider_app.config.submission import ContestLedgerConfig
from strider_app.delivery.contest_ledger import ContestLedger
from strider_app.identity import StaticIdentity
from strider_app.tracking.models import Coordinate, RunSnapshot
from strider_app.tracking.sources import ManualPositionSource, ManualTicker
from strider_app.utils.time import format_elapsed


class SimulatedClock:
    """Clock advanced by the simulation instead of wall time."""

    def __init__(self) -> None:
        self.now = datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def create_loop(lat: float, lon: float, close: bool = True) -> List[Coordinate]:
    """Create a small rectangular route that optionally returns to the start."""
    route = [
        (0.0, 0.0), (0.0010, 0.0), (0.0020, 0.0), (0.0020, 0.0010),
        (0.0020, 0.0020), (0.0010, 0.0020), (0.0, 0.0020), (0.0, 0.0010),
    ]
    if close:
        route.append((0.00003, 0.00002))
    return [Coordinate(lat + d_lat, lon + d_lon) for d_lat, d_lon in route]


def print_snapshot(snapshot: RunSnapshot) -> None:
    """Print the display fields of a snapshot."""
    position = snapshot.current_position
    where = f"{position.latitude:.5f}, {position.longitude:.5f}" if position else "n/a"
    print(f"   [{snapshot.state.value:>8}] time {format_elapsed(snapshot.elapsed_seconds)}"
          f"  distance {snapshot.total_distance_meters:6.0f}m"
          f"  points {snapshot.point_count:2d}  at {where}")


def simulate_run(app: StriderApp, source: ManualPositionSource, ticker: ManualTicker,
                 clock: SimulatedClock, route: List[Coordinate], seconds_per_point: int) -> None:
    """Drive one run through the app."""
    app.start_run()
    for point in route:
        source.push_position(point.latitude, point.longitude, accuracy=5.0)
        clock.advance(seconds_per_point)
        ticker.fire()
    outcome = app.stop_run()
    print(f"   Outcome: {outcome.verdict.value} -> {app.last_message}")


def main():
    """Main demonstration function."""
    print("🏃 Strider Loop Run Tracker - Basic Usage Demo")
    print("=" * 60)

    clock = SimulatedClock()
    source = ManualPositionSource()
    ticker = ManualTicker()
    ledger = ContestLedger("contest", ContestLedgerConfig(), clock=clock)
    app = StriderApp(source, ticker=ticker, overrides={"logging": {"level": "WARNING"}},
                     submission=ledger, clock=clock)

    print("1. Connecting identity...")
    print(f"   {app.connect_identity(StaticIdentity('GDEMORUNNER4Q3W6KX7A5ZPLM2NEXAMPLE0000000000000000STRD'))}")
    print()

    print("2. Running a closed loop (snapshots streamed to the display)...")
    display = app.tracker.subscribe(print_snapshot)
    simulate_run(app, source, ticker, clock, create_loop(28.6139, 77.2090), seconds_per_point=30)
    display.cancel()
    print()

    print("3. Submitting the loop...")
    result = app.submit_run()
    print(f"   {result.status.value}: {result.message}")
    print()

    print("4. Running the same start point without closing the loop...")
    simulate_run(app, source, ticker, clock, create_loop(28.6139, 77.2090, close=False),
                 seconds_per_point=20)
    result = app.submit_run()
    print(f"   {result.status.value}: {result.message}")
    print()

    print("5. A faster closed loop takes the contest...")
    simulate_run(app, source, ticker, clock, create_loop(28.6139, 77.2090), seconds_per_point=25)
    result = app.submit_run()
    print(f"   {result.status.value}: {result.message}")

    contest = ledger.get_record(result.record.loop_id)
    print(f"   Champion: {contest.champion[:8]}... best {format_elapsed(contest.best_time_seconds)}")
    print(f"   Ledger stats: {ledger.get_stats()}")


if __name__ == "__main__":
    main()
