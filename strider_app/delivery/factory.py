"""Submission mechanism selection from configuration."""

from ..config.defaults import SubmissionParams
from ..config.submission import ContestLedgerConfig, StdoutSubmissionConfig, SubmissionMethod
from ..utils.time import Clock, utc_now
from .base import BaseRecordSubmission
from .contest_ledger import ContestLedger
from .stdout_delivery import StdoutRecordSubmission


def create_submission(params: SubmissionParams, clock: Clock = utc_now) -> BaseRecordSubmission:
    """
    Build the configured submission mechanism.

    Raises:
        ValueError: If the method is not supported
    """
    method = SubmissionMethod(params.method)

    if method == SubmissionMethod.CONTEST:
        return ContestLedger(
            "contest",
            ContestLedgerConfig(contest_period_days=params.contest_period_days),
            clock=clock
        )

    return StdoutRecordSubmission(
        "stdout",
        StdoutSubmissionConfig(format=params.format, include_timestamp=params.include_timestamp)
    )
