"""
Error classification tests for the run tracking core.

Covers the condition hierarchy and the rule that user-facing conditions are
reported as status values rather than raised out of the tracker.
"""

import pytest

from strider_app.errors import (
    TrackingConditionError,
    PositionUnavailableError,
    LoopValidationError,
    LoopIndeterminateError,
    LoopInvalidError,
    SubmissionPreconditionError,
    LoopNotValidatedError,
    SystemFailureError,
    StateTransitionError,
    SubmissionError,
)
from strider_app.tracking.models import RunState, StatusKind


class TestErrorClassification:
    """Test error classification system."""

    def test_condition_hierarchy(self):
        base = TrackingConditionError("base condition")
        assert base.recoverable is True
        assert base.context == {}

        position = PositionUnavailableError("denied", code=1, context={"source": "gps"})
        assert isinstance(position, TrackingConditionError)
        assert position.reason == "denied"
        assert position.context == {"source": "gps"}

        invalid = LoopInvalidError("too far", closing_distance=120.0, threshold=50.0, path_length=9)
        assert isinstance(invalid, LoopValidationError)
        assert invalid.closing_distance == 120.0

        indeterminate = LoopIndeterminateError("too short", path_length=2)
        assert isinstance(indeterminate, LoopValidationError)
        assert indeterminate.closing_distance is None

    def test_not_validated_is_a_precondition_failure(self):
        error = LoopNotValidatedError("not judged", path_length=2)

        assert isinstance(error, SubmissionPreconditionError)
        assert error.precondition == "loop_validated"
        assert error.recoverable is True

    def test_precondition_names_failed_check(self):
        error = SubmissionPreconditionError("stop first", precondition="state_stopped")
        assert error.precondition == "state_stopped"
        assert error.message == "stop first"

    def test_system_failure_hierarchy(self):
        transition = StateTransitionError("bad", current_state="idle", attempted_transition="stop")
        assert isinstance(transition, SystemFailureError)
        assert transition.recoverable is False

        submission = SubmissionError("ledger down", submitter="contest", loop_id="loop_1_1")
        assert isinstance(submission, SystemFailureError)
        assert submission.loop_id == "loop_1_1"

    def test_conditions_and_failures_are_disjoint(self):
        assert not issubclass(SystemFailureError, TrackingConditionError)
        assert not issubclass(TrackingConditionError, SystemFailureError)


class TestTrackerErrorHandling:
    """Conditions surface as status values, never as exceptions."""

    def test_position_error_before_start(self, tracker):
        snapshot = tracker.on_sample_error(PositionUnavailableError("Permission denied", code=1))

        assert snapshot.state == RunState.IDLE
        assert snapshot.status.kind == StatusKind.POSITION_UNAVAILABLE

    def test_stop_while_idle_does_not_raise(self, tracker):
        assert tracker.stop() is None

    @pytest.mark.parametrize("points", [0, 1, 2])
    def test_short_run_stop_does_not_raise(self, tracker, position_source, points):
        tracker.start()
        for i in range(points):
            position_source.push_position(0.0, i * 0.001)

        outcome = tracker.stop()

        assert outcome.verdict.value == "indeterminate"
