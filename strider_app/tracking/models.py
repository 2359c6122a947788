"""
Run tracking data models.

This module defines the immutable value types exchanged with collaborators
(coordinates, samples, snapshots, status reports) and the mutable run
session that only the run tracker owns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from ..errors import StateTransitionError

if TYPE_CHECKING:
    from ..validation.loop import LoopOutcome


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Sample:
    """One position fix pushed by a position source."""

    coordinate: Coordinate
    accuracy: Optional[float] = None                 # Reported accuracy in meters, unused by the core
    timestamp: Optional[datetime] = None             # Source time, arrival order is authoritative

    @classmethod
    def at(cls, latitude: float, longitude: float,
           accuracy: Optional[float] = None,
           timestamp: Optional[datetime] = None) -> "Sample":
        return cls(Coordinate(latitude, longitude), accuracy, timestamp)


class RunState(str, Enum):
    """Run lifecycle states."""
    IDLE = "idle"
    TRACKING = "tracking"
    STOPPED = "stopped"


class StatusKind(str, Enum):
    """Kinds of user-visible status reported by the tracker."""
    TRACKING_STARTED = "tracking_started"
    POSITION_UNAVAILABLE = "position_unavailable"
    NOT_TRACKING_ON_STOP = "not_tracking_on_stop"
    LOOP_VALID = "loop_valid"
    LOOP_INVALID = "loop_invalid"
    LOOP_INDETERMINATE = "loop_indeterminate"


@dataclass(frozen=True)
class StatusReport:
    """Latest status message for display."""
    kind: StatusKind
    message: str
    context: Optional[dict[str, Any]] = None


@dataclass
class RunSession:
    """
    Live state of one run.

    Owned exclusively by a RunTracker; collaborators only ever see a
    RunSnapshot built from it.
    """

    session_id: int = 0
    state: RunState = RunState.IDLE
    start_time: Optional[datetime] = None
    elapsed_seconds: int = 0
    path: list[Coordinate] = field(default_factory=list)
    total_distance_meters: float = 0.0
    current_position: Optional[Coordinate] = None

    @classmethod
    def begin(cls, session_id: int, start_time: datetime) -> "RunSession":
        """Create a fresh session in TRACKING state."""
        return cls(
            session_id=session_id,
            state=RunState.TRACKING,
            start_time=start_time,
        )

    def record(self, coordinate: Coordinate, total_distance_meters: float) -> None:
        """Append a coordinate together with the matching running total."""
        if self.state != RunState.TRACKING:
            raise StateTransitionError(
                "Path is append-only while tracking",
                current_state=self.state.value,
                attempted_transition="record_sample"
            )
        self.path.append(coordinate)
        self.total_distance_meters = total_distance_meters
        self.current_position = coordinate

    def mark_stopped(self) -> None:
        if self.state != RunState.TRACKING:
            raise StateTransitionError(
                "Only a tracking session can be stopped",
                current_state=self.state.value,
                attempted_transition="stop"
            )
        self.state = RunState.STOPPED


@dataclass(frozen=True)
class RunSnapshot:
    """Immutable view of a run session handed to display and submission collaborators."""

    state: RunState
    session_id: int = 0
    current_position: Optional[Coordinate] = None
    path: tuple[Coordinate, ...] = ()
    elapsed_seconds: int = 0
    total_distance_meters: float = 0.0
    start_time: Optional[datetime] = None
    status: Optional[StatusReport] = None
    loop_outcome: Optional["LoopOutcome"] = None
    revision: int = 0                               # Bumped on every tracker change

    @property
    def point_count(self) -> int:
        return len(self.path)

    @classmethod
    def of(cls, session: RunSession,
           status: Optional[StatusReport] = None,
           loop_outcome: Optional["LoopOutcome"] = None,
           revision: int = 0) -> "RunSnapshot":
        return cls(
            state=session.state,
            session_id=session.session_id,
            current_position=session.current_position,
            path=tuple(session.path),
            elapsed_seconds=session.elapsed_seconds,
            total_distance_meters=session.total_distance_meters,
            start_time=session.start_time,
            status=status,
            loop_outcome=loop_outcome,
            revision=revision,
        )
