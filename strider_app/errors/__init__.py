"""
Condition classification for the run tracking core.

User-facing conditions (position loss, loop judgments, submission
preconditions) are recoverable and surfaced as status values. System
failures mark programming misuse or a failing external collaborator.
"""

from .conditions import (
    TrackingConditionError,
    PositionUnavailableError,
    LoopValidationError,
    LoopIndeterminateError,
    LoopInvalidError,
    SubmissionPreconditionError,
    LoopNotValidatedError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    SubmissionError,
)

__all__ = [
    # Recoverable conditions
    "TrackingConditionError",
    "PositionUnavailableError",
    "LoopValidationError",
    "LoopIndeterminateError",
    "LoopInvalidError",
    "SubmissionPreconditionError",
    "LoopNotValidatedError",
    # System failures
    "SystemFailureError",
    "StateTransitionError",
    "SubmissionError",
]
