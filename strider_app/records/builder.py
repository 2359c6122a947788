"""Run record assembly and loop identifier derivation."""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from ..errors import LoopIndeterminateError, LoopNotValidatedError, SubmissionPreconditionError
from ..tracking.models import Coordinate, RunSnapshot, RunState
from ..validation.loop import LoopValidator

logger = structlog.get_logger(__name__)

LOOP_ID_PREFIX = "loop"
LOOP_ID_PRECISION = 4


@dataclass(frozen=True)
class RunRecord:
    """Finalized summary of a validated run, ready for submission."""

    loop_id: str
    elapsed_seconds: int
    distance_meters: float
    submitter_address: str

    def to_payload(self) -> dict[str, Any]:
        """Submission payload in the ledger's field names."""
        return {
            "user": self.submitter_address,
            "loop_id": self.loop_id,
            "time_seconds": self.elapsed_seconds,
            "distance_meters": round(self.distance_meters, 2),
        }


def derive_loop_id(start: Coordinate, prefix: str = LOOP_ID_PREFIX,
                   precision: int = LOOP_ID_PRECISION) -> str:
    """
    Identify a loop location from its starting coordinate.

    Runs starting at the same rounded coordinate share a loop id, e.g.
    (28.61390123, 77.20900456) -> "loop_28.6139_77.2090".
    """
    return f"{prefix}_{start.latitude:.{precision}f}_{start.longitude:.{precision}f}"


class RunRecordBuilder:
    """Builds RunRecords from stopped run snapshots, refusing anything unvalidated."""

    def __init__(self, validator: Optional[LoopValidator] = None,
                 loop_id_prefix: str = LOOP_ID_PREFIX,
                 loop_id_precision: int = LOOP_ID_PRECISION):
        self.validator = validator or LoopValidator()
        self.loop_id_prefix = loop_id_prefix
        self.loop_id_precision = loop_id_precision
        self.logger = logger

    def build(self, snapshot: RunSnapshot, submitter_address: str) -> RunRecord:
        """
        Build the record for a finished run.

        Args:
            snapshot: Snapshot of a stopped run
            submitter_address: Opaque identity of the runner, passed through unchanged

        Returns:
            RunRecord for submission

        Raises:
            SubmissionPreconditionError: Run not stopped or fewer than two points
            LoopNotValidatedError: Loop closure could not be judged
            LoopInvalidError: Start and end are too far apart
        """
        if snapshot.state != RunState.STOPPED:
            raise SubmissionPreconditionError(
                "Run must be stopped before it can be submitted",
                precondition="state_stopped",
                context={"state": snapshot.state.value}
            )

        if snapshot.point_count < 2:
            raise SubmissionPreconditionError(
                "No valid run to submit",
                precondition="min_path_length",
                context={"points": snapshot.point_count}
            )

        outcome = self.validator.evaluate(snapshot.path, session_id=snapshot.session_id)

        try:
            outcome.raise_for_verdict()
        except LoopIndeterminateError as e:
            raise LoopNotValidatedError(
                f"Loop closure was not judged for a {outcome.path_length}-point run",
                path_length=outcome.path_length
            ) from e

        record = RunRecord(
            loop_id=derive_loop_id(snapshot.path[0], self.loop_id_prefix, self.loop_id_precision),
            elapsed_seconds=snapshot.elapsed_seconds,
            distance_meters=snapshot.total_distance_meters,
            submitter_address=submitter_address,
        )

        self.logger.info(
            "Built run record",
            session_id=snapshot.session_id,
            loop_id=record.loop_id,
            elapsed_s=record.elapsed_seconds,
            distance_m=round(record.distance_meters, 2)
        )
        return record
