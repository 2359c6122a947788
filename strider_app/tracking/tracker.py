"""
Run tracker state machine.

Drives one run session through IDLE → TRACKING → STOPPED from a position
stream and a periodic tick, and validates loop closure when the run stops.
Every mutation is serialized through one lock so threaded sources keep the
single-writer invariant; listeners are notified after the lock is released.
"""

import threading
from typing import Callable, Optional, Union

from ..errors import PositionUnavailableError
from ..logging.config import get_state_logger, log_state_transition
from ..metrics.distance import DistanceAccumulator
from ..utils.time import Clock, elapsed_whole_seconds, format_timestamp, utc_now
from ..validation.loop import LoopOutcome, LoopValidator, LoopVerdict
from .models import (
    Coordinate,
    RunSession,
    RunSnapshot,
    RunState,
    Sample,
    StatusKind,
    StatusReport,
)
from .sources import BasePositionSource, BaseTicker, Subscription

state_logger = get_state_logger(__name__)

SnapshotListener = Callable[[RunSnapshot], None]


class RunTracker:
    """Owns the live run session and exposes it only as snapshots."""

    def __init__(
        self,
        position_source: BasePositionSource,
        ticker: BaseTicker,
        clock: Clock = utc_now,
        validator: Optional[LoopValidator] = None,
        tick_interval_seconds: float = 1.0
    ):
        self.position_source = position_source
        self.ticker = ticker
        self.clock = clock
        self.validator = validator or LoopValidator()
        self.tick_interval_seconds = tick_interval_seconds
        self.logger = state_logger

        self._lock = threading.RLock()
        self._session = RunSession()
        self._accumulator = DistanceAccumulator()
        self._session_seq = 0
        self._revision = 0
        self._status: Optional[StatusReport] = None
        self._outcome: Optional[LoopOutcome] = None
        self._position_sub: Optional[Subscription] = None
        self._tick_sub: Optional[Subscription] = None
        self._listeners: list[SnapshotListener] = []

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._session.state

    @property
    def is_tracking(self) -> bool:
        return self.state == RunState.TRACKING

    def snapshot(self) -> RunSnapshot:
        """Immutable copy of the current session for display or submission."""
        with self._lock:
            return self._snapshot()

    def subscribe(self, listener: SnapshotListener) -> Subscription:
        """
        Register a listener called with a fresh snapshot after every change.

        Listeners run outside the tracker lock, so with threaded sources two
        notifications can arrive out of order; keep the snapshot with the
        highest ``revision``.
        """
        with self._lock:
            self._listeners.append(listener)
        return Subscription(lambda: self._remove_listener(listener))

    def start(self) -> RunSnapshot:
        """
        Begin a new run, discarding any previous session.

        An unfinished run is not merged into the new one: its subscriptions
        are released and its path and distance dropped.
        """
        with self._lock:
            previous = self._session
            self._release_subscriptions()

            if previous.state == RunState.TRACKING:
                log_state_transition(
                    self.logger,
                    session_id=previous.session_id,
                    from_state=previous.state.value,
                    to_state=RunState.IDLE.value,
                    trigger="replaced_by_start",
                    context={"discarded_points": len(previous.path)}
                )

            self._session_seq += 1
            self._accumulator.reset()
            self._outcome = None
            self._session = RunSession.begin(self._session_seq, self.clock())

            try:
                self._position_sub = self.position_source.subscribe(
                    self.on_sample, self.on_sample_error
                )
            except PositionUnavailableError as e:
                self._session = RunSession(session_id=self._session_seq)
                self._status = StatusReport(
                    StatusKind.POSITION_UNAVAILABLE,
                    f"GPS Error: {e.message}",
                    context={"reason": e.reason, "code": e.code}
                )
                self.logger.warning(
                    "Position source refused subscription",
                    session_id=self._session_seq,
                    reason=e.reason
                )
                snapshot = self._changed()
            else:
                try:
                    self._tick_sub = self.ticker.schedule(self.tick_interval_seconds, self.tick)
                except Exception:
                    self._release_subscriptions()
                    self._session = RunSession(session_id=self._session_seq)
                    raise
                self._status = StatusReport(StatusKind.TRACKING_STARTED, "Tracking started...")
                log_state_transition(
                    self.logger,
                    session_id=self._session.session_id,
                    from_state=previous.state.value,
                    to_state=RunState.TRACKING.value,
                    trigger="start",
                    context={"start_time": format_timestamp(self._session.start_time)}
                )
                snapshot = self._changed()

        self._notify(snapshot)
        return snapshot

    def on_sample(self, sample: Union[Sample, Coordinate]) -> Optional[RunSnapshot]:
        """Apply one position fix; ignored unless tracking."""
        coordinate = sample.coordinate if isinstance(sample, Sample) else sample

        with self._lock:
            if self._session.state != RunState.TRACKING:
                self.logger.debug(
                    "Ignoring sample outside tracking",
                    session_id=self._session.session_id,
                    state=self._session.state.value
                )
                return None

            self._accumulator.update(coordinate)
            self._session.record(coordinate, self._accumulator.total_meters)
            snapshot = self._changed()

        self._notify(snapshot)
        return snapshot

    def on_sample_error(self, error: Exception) -> RunSnapshot:
        """
        Report a position stream failure.

        The session keeps its state so sampling can resume if the stream
        recovers.
        """
        message = getattr(error, "message", None) or str(error)
        reason = getattr(error, "reason", message)
        code = getattr(error, "code", None)

        with self._lock:
            self._status = StatusReport(
                StatusKind.POSITION_UNAVAILABLE,
                f"GPS Error: {message}",
                context={"reason": reason, "code": code}
            )
            self.logger.warning(
                "Position source error",
                session_id=self._session.session_id,
                state=self._session.state.value,
                reason=reason,
                code=code
            )
            snapshot = self._changed()

        self._notify(snapshot)
        return snapshot

    def tick(self) -> Optional[RunSnapshot]:
        """Refresh elapsed seconds from the clock; ignored unless tracking."""
        with self._lock:
            if self._session.state != RunState.TRACKING:
                return None
            elapsed = elapsed_whole_seconds(self._session.start_time, self.clock())
            if elapsed == self._session.elapsed_seconds:
                return self._snapshot()
            self._session.elapsed_seconds = elapsed
            snapshot = self._changed()

        self._notify(snapshot)
        return snapshot

    def stop(self) -> Optional[LoopOutcome]:
        """
        Stop the run and judge loop closure.

        Returns:
            The loop outcome, or None when no run was being tracked
        """
        with self._lock:
            session = self._session
            if session.state != RunState.TRACKING:
                self.logger.debug(
                    "Stop requested while not tracking",
                    session_id=session.session_id,
                    state=session.state.value,
                    status=StatusKind.NOT_TRACKING_ON_STOP.value
                )
                return None

            self._release_subscriptions()
            session.elapsed_seconds = elapsed_whole_seconds(session.start_time, self.clock())
            session.mark_stopped()

            outcome = self.validator.evaluate(session.path, session_id=session.session_id)
            self._outcome = outcome
            self._status = self._loop_status(outcome, session)

            log_state_transition(
                self.logger,
                session_id=session.session_id,
                from_state=RunState.TRACKING.value,
                to_state=RunState.STOPPED.value,
                trigger="stop",
                context={
                    "points": len(session.path),
                    "distance_m": round(session.total_distance_meters, 2),
                    "elapsed_s": session.elapsed_seconds,
                    "verdict": outcome.verdict.value
                }
            )
            snapshot = self._changed()

        self._notify(snapshot)
        return outcome

    def _loop_status(self, outcome: LoopOutcome, session: RunSession) -> StatusReport:
        if outcome.verdict == LoopVerdict.VALID:
            return StatusReport(
                StatusKind.LOOP_VALID,
                f"Valid loop! Time: {session.elapsed_seconds}s, "
                f"Distance: {session.total_distance_meters:.0f}m",
                context={"closing_distance_m": outcome.closing_distance_meters}
            )
        if outcome.verdict == LoopVerdict.INVALID:
            return StatusReport(
                StatusKind.LOOP_INVALID,
                f"Invalid loop! Start and end are {outcome.closing_distance_meters:.0f}m apart "
                f"(must be < {outcome.threshold_meters:.0f}m)",
                context={"closing_distance_m": outcome.closing_distance_meters}
            )
        return StatusReport(
            StatusKind.LOOP_INDETERMINATE,
            f"Run stopped with {outcome.path_length} points, too few to judge the loop",
            context={"points": outcome.path_length}
        )

    def _release_subscriptions(self) -> None:
        """Cancel both subscriptions; a failing cancel is logged, never raised."""
        subscriptions = (("position", self._position_sub), ("tick", self._tick_sub))
        self._position_sub = None
        self._tick_sub = None
        for kind, subscription in subscriptions:
            if subscription is None:
                continue
            try:
                subscription.cancel()
            except Exception as e:
                self.logger.error(
                    "Subscription release failed",
                    session_id=self._session.session_id,
                    subscription=kind,
                    error=str(e),
                    exc_info=True
                )

    def _snapshot(self) -> RunSnapshot:
        return RunSnapshot.of(self._session, status=self._status,
                              loop_outcome=self._outcome, revision=self._revision)

    def _changed(self) -> RunSnapshot:
        self._revision += 1
        return self._snapshot()

    def _remove_listener(self, listener: SnapshotListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, snapshot: RunSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(
                    "Snapshot listener failed",
                    session_id=snapshot.session_id,
                    error=str(e),
                    exc_info=True
                )
