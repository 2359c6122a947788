"""
Recoverable condition classifications for run tracking.

These exceptions describe situations the user can act on: a lost position
fix, a loop that did not close, or a submission attempted too early.
"""

from typing import Optional, Dict, Any


class TrackingConditionError(Exception):
    """Base class for user-visible conditions that never end the process."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = True


class PositionUnavailableError(TrackingConditionError):
    """The position source cannot produce samples (sensor or permission failure)."""

    def __init__(self, message: str, reason: Optional[str] = None,
                 code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason or message
        self.code = code


class LoopValidationError(TrackingConditionError):
    """A finished path did not receive a valid closure judgment."""

    def __init__(self, message: str, closing_distance: Optional[float] = None,
                 threshold: Optional[float] = None, path_length: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.closing_distance = closing_distance
        self.threshold = threshold
        self.path_length = path_length


class LoopIndeterminateError(LoopValidationError):
    """Path too short for any closure judgment."""


class LoopInvalidError(LoopValidationError):
    """Start and end of the path are further apart than the closure threshold."""


class SubmissionPreconditionError(TrackingConditionError):
    """Record building was requested without a stopped, validated session."""

    def __init__(self, message: str, precondition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.precondition = precondition


class LoopNotValidatedError(SubmissionPreconditionError):
    """The loop judgment was indeterminate, so no record can be built."""

    def __init__(self, message: str, path_length: int = 0, **kwargs):
        kwargs.setdefault("precondition", "loop_validated")
        super().__init__(message, **kwargs)
        self.path_length = path_length
