"""Tests for the run tracker state machine."""

import pytest
from unittest.mock import Mock

from strider_app.errors import PositionUnavailableError
from strider_app.metrics.distance import haversine_distance
from strider_app.tracking.models import Coordinate, RunState, Sample, StatusKind
from strider_app.tracking.sources import BasePositionSource, BaseTicker, Subscription
from strider_app.tracking.tracker import RunTracker
from strider_app.validation.loop import LoopVerdict


def feed(source, path):
    for point in path:
        source.push(Sample(point))


class TestStart:
    """Test RunTracker.start."""

    def test_initial_state_is_idle(self, tracker):
        snapshot = tracker.snapshot()

        assert snapshot.state == RunState.IDLE
        assert snapshot.path == ()
        assert snapshot.elapsed_seconds == 0
        assert snapshot.total_distance_meters == 0.0
        assert snapshot.start_time is None

    def test_start_begins_tracking(self, tracker, position_source, ticker, clock):
        snapshot = tracker.start()

        assert snapshot.state == RunState.TRACKING
        assert tracker.is_tracking
        assert snapshot.start_time == clock.now
        assert snapshot.status.kind == StatusKind.TRACKING_STARTED
        assert snapshot.status.message == "Tracking started..."
        assert position_source.subscriber_count == 1
        assert ticker.active_count == 1
        assert ticker.intervals == [1.0]

    def test_start_resets_prior_run(self, tracker, position_source, clock, open_path):
        tracker.start()
        feed(position_source, open_path)
        clock.advance(30)
        tracker.tick()
        tracker.stop()
        assert tracker.snapshot().total_distance_meters > 0

        snapshot = tracker.start()

        assert snapshot.state == RunState.TRACKING
        assert snapshot.path == ()
        assert snapshot.elapsed_seconds == 0
        assert snapshot.total_distance_meters == 0.0
        assert snapshot.current_position is None
        assert snapshot.loop_outcome is None

    def test_restart_while_tracking_replaces_session(self, tracker, position_source, ticker, open_path):
        first = tracker.start()
        feed(position_source, open_path)

        second = tracker.start()

        assert second.session_id == first.session_id + 1
        assert second.path == ()
        assert second.total_distance_meters == 0.0
        # Old subscriptions released, exactly one new pair held
        assert position_source.subscriber_count == 1
        assert ticker.active_count == 1

    def test_restart_does_not_carry_distance_from_old_path(self, tracker, position_source):
        tracker.start()
        position_source.push_position(10.0, 10.0)
        tracker.start()
        position_source.push_position(0.0, 0.0)

        assert tracker.snapshot().total_distance_meters == 0.0

    def test_subscription_refused(self, ticker, clock):
        source = Mock(spec=BasePositionSource)
        source.subscribe.side_effect = PositionUnavailableError(
            "Geolocation not supported", code=2
        )
        tracker = RunTracker(source, ticker, clock=clock)

        snapshot = tracker.start()

        assert snapshot.state == RunState.IDLE
        assert snapshot.status.kind == StatusKind.POSITION_UNAVAILABLE
        assert snapshot.status.message == "GPS Error: Geolocation not supported"
        assert ticker.active_count == 0


class TestSamples:
    """Test sample handling."""

    def test_samples_append_in_order(self, tracker, position_source, city_loop_path):
        tracker.start()
        feed(position_source, city_loop_path)

        snapshot = tracker.snapshot()
        assert list(snapshot.path) == city_loop_path
        assert snapshot.point_count == len(city_loop_path)
        assert snapshot.current_position == city_loop_path[-1]

    def test_distance_matches_sum_of_legs(self, tracker, position_source, city_loop_path):
        tracker.start()
        feed(position_source, city_loop_path)

        expected = sum(haversine_distance(a, b)
                       for a, b in zip(city_loop_path, city_loop_path[1:]))
        assert tracker.snapshot().total_distance_meters == pytest.approx(expected)

    def test_accepts_bare_coordinates(self, tracker):
        tracker.start()
        snapshot = tracker.on_sample(Coordinate(1.0, 2.0))

        assert snapshot.path == (Coordinate(1.0, 2.0),)

    def test_samples_ignored_when_idle(self, tracker):
        assert tracker.on_sample(Coordinate(1.0, 2.0)) is None
        assert tracker.snapshot().path == ()

    def test_samples_after_stop_are_ignored(self, tracker, position_source, closed_loop_path):
        tracker.start()
        feed(position_source, closed_loop_path)
        tracker.stop()
        before = tracker.snapshot()

        # Direct delivery from a source that missed the cancellation
        assert tracker.on_sample(Sample.at(5.0, 5.0)) is None

        after = tracker.snapshot()
        assert after.path == before.path
        assert after.total_distance_meters == before.total_distance_meters
        assert after.state == RunState.STOPPED

    def test_snapshot_path_is_immutable_copy(self, tracker, position_source):
        tracker.start()
        position_source.push_position(1.0, 1.0)
        snapshot = tracker.snapshot()

        position_source.push_position(1.0, 1.001)

        assert snapshot.path == (Coordinate(1.0, 1.0),)
        assert isinstance(snapshot.path, tuple)


class TestSampleErrors:
    """Test position stream failures."""

    def test_error_reported_without_aborting(self, tracker, position_source):
        tracker.start()
        position_source.push_position(1.0, 1.0)

        position_source.fail("User denied Geolocation", code=1)

        snapshot = tracker.snapshot()
        assert snapshot.state == RunState.TRACKING
        assert snapshot.status.kind == StatusKind.POSITION_UNAVAILABLE
        assert snapshot.status.message == "GPS Error: User denied Geolocation"
        assert snapshot.status.context["code"] == 1

    def test_sampling_resumes_after_error(self, tracker, position_source):
        tracker.start()
        position_source.push_position(1.0, 1.0)
        position_source.fail("Position unavailable", code=2)
        position_source.push_position(1.0, 1.001)

        assert tracker.snapshot().point_count == 2

    def test_generic_exception_is_reported(self, tracker):
        snapshot = tracker.on_sample_error(RuntimeError("sensor offline"))

        assert snapshot.state == RunState.IDLE
        assert snapshot.status.message == "GPS Error: sensor offline"

    def test_stop_releases_after_error(self, tracker, position_source, ticker):
        tracker.start()
        position_source.fail("Timeout expired", code=3)

        tracker.stop()

        assert position_source.subscriber_count == 0
        assert ticker.active_count == 0


class TestTick:
    """Test elapsed time updates."""

    def test_tick_floors_elapsed_seconds(self, tracker, ticker, clock):
        tracker.start()
        clock.advance(2.9)
        ticker.fire()

        assert tracker.snapshot().elapsed_seconds == 2

    def test_tick_ignored_when_not_tracking(self, tracker, clock):
        clock.advance(10)
        assert tracker.tick() is None
        assert tracker.snapshot().elapsed_seconds == 0

    def test_ticker_cancelled_on_stop(self, tracker, ticker, clock):
        tracker.start()
        clock.advance(5)
        ticker.fire()
        tracker.stop()
        elapsed = tracker.snapshot().elapsed_seconds

        clock.advance(100)
        ticker.fire()

        assert ticker.active_count == 0
        assert tracker.snapshot().elapsed_seconds == elapsed


class TestStop:
    """Test RunTracker.stop."""

    def test_stop_when_idle_is_noop(self, tracker):
        assert tracker.stop() is None
        assert tracker.snapshot().state == RunState.IDLE

    def test_second_stop_is_noop(self, tracker, position_source, closed_loop_path):
        tracker.start()
        feed(position_source, closed_loop_path)
        first = tracker.stop()
        status = tracker.snapshot().status

        assert tracker.stop() is None
        assert tracker.snapshot().status == status
        assert first.verdict == LoopVerdict.VALID

    def test_scenario_a_valid(self, tracker, position_source, clock, closed_loop_path):
        tracker.start()
        feed(position_source, closed_loop_path)
        clock.advance(95)

        outcome = tracker.stop()
        snapshot = tracker.snapshot()

        assert outcome.verdict == LoopVerdict.VALID
        assert snapshot.state == RunState.STOPPED
        assert snapshot.elapsed_seconds == 95
        assert snapshot.loop_outcome == outcome
        assert snapshot.status.kind == StatusKind.LOOP_VALID
        assert snapshot.status.message == (
            f"Valid loop! Time: 95s, Distance: {snapshot.total_distance_meters:.0f}m"
        )

    def test_scenario_b_invalid(self, tracker, position_source, open_path):
        tracker.start()
        feed(position_source, open_path)

        outcome = tracker.stop()
        snapshot = tracker.snapshot()

        assert outcome.verdict == LoopVerdict.INVALID
        assert snapshot.status.kind == StatusKind.LOOP_INVALID
        assert snapshot.status.message.startswith("Invalid loop! Start and end are ")
        assert snapshot.status.message.endswith("m apart (must be < 50m)")

    @pytest.mark.parametrize("points", [0, 1, 2])
    def test_short_path_is_indeterminate(self, tracker, position_source, open_path, points):
        tracker.start()
        feed(position_source, open_path[:points])

        outcome = tracker.stop()

        assert outcome.verdict == LoopVerdict.INDETERMINATE
        assert tracker.snapshot().status.kind == StatusKind.LOOP_INDETERMINATE

    def test_stop_releases_subscriptions(self, tracker, position_source, ticker):
        tracker.start()
        tracker.stop()

        assert position_source.subscriber_count == 0
        assert ticker.active_count == 0

    def test_failing_release_still_judges_loop(self, ticker, clock, closed_loop_path):
        source = Mock(spec=BasePositionSource)
        source.subscribe.return_value = Subscription(
            Mock(side_effect=OSError("watch already torn down"))
        )
        tracker = RunTracker(source, ticker, clock=clock)
        tracker.logger = Mock()
        tracker.start()
        for point in closed_loop_path:
            tracker.on_sample(point)

        outcome = tracker.stop()
        snapshot = tracker.snapshot()

        assert outcome.verdict == LoopVerdict.VALID
        assert snapshot.state == RunState.STOPPED
        assert snapshot.loop_outcome == outcome
        assert snapshot.status.kind == StatusKind.LOOP_VALID
        assert ticker.active_count == 0
        tracker.logger.error.assert_called_once()
        assert tracker.logger.error.call_args.kwargs["subscription"] == "position"

    def test_failing_tick_release_still_stops(self, position_source, clock, closed_loop_path):
        ticker = Mock(spec=BaseTicker)
        ticker.schedule.return_value = Subscription(Mock(side_effect=RuntimeError("timer gone")))
        tracker = RunTracker(position_source, ticker, clock=clock)
        tracker.start()
        feed(position_source, closed_loop_path)

        outcome = tracker.stop()

        assert outcome.verdict == LoopVerdict.VALID
        assert position_source.subscriber_count == 0
        assert tracker.snapshot().status.kind == StatusKind.LOOP_VALID

    def test_pushes_after_stop_do_not_reach_tracker(self, tracker, position_source, closed_loop_path):
        tracker.start()
        feed(position_source, closed_loop_path)
        tracker.stop()

        position_source.push_position(50.0, 50.0)

        assert tracker.snapshot().point_count == len(closed_loop_path)


class TestListeners:
    """Test change notifications."""

    def test_listener_receives_snapshots(self, tracker, position_source):
        received = []
        tracker.subscribe(received.append)

        tracker.start()
        position_source.push_position(1.0, 1.0)
        tracker.stop()

        assert [s.state for s in received] == [
            RunState.TRACKING, RunState.TRACKING, RunState.STOPPED
        ]
        assert received[1].point_count == 1

    def test_cancelled_listener_stops_receiving(self, tracker):
        received = []
        subscription = tracker.subscribe(received.append)
        subscription.cancel()
        subscription.cancel()

        tracker.start()

        assert received == []

    def test_failing_listener_does_not_break_tracking(self, tracker, position_source):
        tracker.subscribe(Mock(side_effect=ValueError("render failed")))
        tracker.start()
        position_source.push_position(1.0, 1.0)

        assert tracker.snapshot().point_count == 1

    def test_revision_increases_with_each_change(self, tracker, position_source, ticker, clock):
        received = []
        tracker.subscribe(received.append)

        tracker.start()
        position_source.push_position(1.0, 1.0)
        clock.advance(1)
        ticker.fire()
        tracker.stop()

        revisions = [s.revision for s in received]
        assert revisions == sorted(revisions)
        assert len(set(revisions)) == len(revisions) == 4
        assert tracker.snapshot().revision == revisions[-1]

    def test_reads_and_idle_ticks_keep_revision(self, tracker, ticker):
        tracker.start()
        revision = tracker.snapshot().revision

        ticker.fire()

        assert tracker.snapshot().revision == revision

    def test_listener_can_read_snapshot(self, tracker, position_source):
        seen = []
        tracker.subscribe(lambda snapshot: seen.append(tracker.snapshot().point_count))

        tracker.start()
        position_source.push_position(1.0, 1.0)

        assert seen == [0, 1]
