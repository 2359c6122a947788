"""
System failure classifications for unrecoverable errors.

These exceptions represent programming misuse of the core or a failing
external collaborator, as opposed to conditions a runner can fix.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """Invalid lifecycle transition requested on a run session."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class SubmissionError(SystemFailureError):
    """Ledger submission collaborator failed to perform the write."""

    def __init__(self, message: str, submitter: Optional[str] = None,
                 loop_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.submitter = submitter
        self.loop_id = loop_id
