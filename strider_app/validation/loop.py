"""Loop closure validation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..errors import LoopIndeterminateError, LoopInvalidError
from ..logging.config import get_validation_logger, log_loop_decision
from ..metrics.distance import haversine_distance
from ..tracking.models import Coordinate

CLOSURE_THRESHOLD_METERS = 50.0
MIN_POINTS_FOR_JUDGMENT = 3

validation_logger = get_validation_logger(__name__)


class LoopVerdict(str, Enum):
    """Closure judgment for a finished path."""
    VALID = "valid"
    INVALID = "invalid"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class LoopOutcome:
    """Result of evaluating a path for loop closure."""

    verdict: LoopVerdict
    threshold_meters: float
    path_length: int
    closing_distance_meters: Optional[float] = None  # None when indeterminate

    @property
    def is_valid(self) -> bool:
        return self.verdict == LoopVerdict.VALID

    def raise_for_verdict(self) -> None:
        """Raise the matching condition unless the loop is valid."""
        if self.verdict == LoopVerdict.INDETERMINATE:
            raise LoopIndeterminateError(
                f"Path has {self.path_length} points, too few to judge loop closure",
                threshold=self.threshold_meters,
                path_length=self.path_length
            )
        if self.verdict == LoopVerdict.INVALID:
            raise LoopInvalidError(
                f"Start and end are {self.closing_distance_meters:.0f}m apart "
                f"(must be < {self.threshold_meters:.0f}m)",
                closing_distance=self.closing_distance_meters,
                threshold=self.threshold_meters,
                path_length=self.path_length
            )


class LoopValidator:
    """
    Stateless loop closure judge.

    Paths with fewer than ``MIN_POINTS_FOR_JUDGMENT`` coordinates are
    indeterminate; that cutoff is fixed and not configurable.
    Otherwise the start-to-end distance is compared against the threshold;
    a distance exactly at the threshold still counts as closed.
    """

    def __init__(self, threshold_meters: float = CLOSURE_THRESHOLD_METERS):
        self.threshold_meters = threshold_meters
        self.logger = validation_logger

    def evaluate(self, path: Sequence[Coordinate],
                 session_id: Optional[int] = None) -> LoopOutcome:
        """
        Evaluate a path for loop closure.

        Args:
            path: Ordered coordinates of the run
            session_id: Optional session number for log correlation

        Returns:
            LoopOutcome with the verdict and closing distance
        """
        path_length = len(path)

        if path_length < MIN_POINTS_FOR_JUDGMENT:
            outcome = LoopOutcome(
                verdict=LoopVerdict.INDETERMINATE,
                threshold_meters=self.threshold_meters,
                path_length=path_length,
            )
        else:
            closing_distance = haversine_distance(path[0], path[-1])
            verdict = (LoopVerdict.INVALID if closing_distance > self.threshold_meters
                       else LoopVerdict.VALID)
            outcome = LoopOutcome(
                verdict=verdict,
                threshold_meters=self.threshold_meters,
                path_length=path_length,
                closing_distance_meters=closing_distance,
            )

        log_loop_decision(
            self.logger,
            verdict=outcome.verdict.value,
            closing_distance=outcome.closing_distance_meters,
            threshold=self.threshold_meters,
            path_length=path_length,
            session_id=session_id,
        )
        return outcome
