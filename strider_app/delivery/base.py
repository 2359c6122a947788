"""Base classes for run record submission mechanisms."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from ..errors import SubmissionError
from ..records.builder import RunRecord


class SubmissionStatus(Enum):
    """Run record submission status."""
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    """Result of a submission attempt."""
    status: SubmissionStatus
    message: Optional[str] = None
    record: Optional[RunRecord] = None
    submission_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status == SubmissionStatus.SUCCESS


class BaseRecordSubmission(ABC):
    """Base class for ledger submission mechanisms."""

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"record.submission.{name}")
        self._success_count = 0
        self._rejected_count = 0
        self._error_count = 0

    @abstractmethod
    def submit(self, record: RunRecord) -> SubmissionResult:
        """
        Write one run record to the ledger.

        Args:
            record: Finalized run record

        Returns:
            Result as reported by the ledger

        Raises:
            SubmissionError: The write itself could not be performed
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if submission mechanism is healthy."""
        pass

    def submit_once(self, record: RunRecord) -> SubmissionResult:
        """
        Submit without retrying, converting collaborator failures to FAILED results.
        """
        start_time = time.time()
        try:
            result = self.submit(record)
        except SubmissionError as e:
            self._error_count += 1
            self.logger.error(
                "Submission failed",
                submitter=self.name,
                loop_id=record.loop_id,
                error=str(e)
            )
            return SubmissionResult(
                status=SubmissionStatus.FAILED,
                message=f"Submission error: {str(e)}",
                record=record,
                error=e
            )

        result.submission_time_ms = int((time.time() - start_time) * 1000)
        if result.status == SubmissionStatus.SUCCESS:
            self._success_count += 1
        elif result.status == SubmissionStatus.REJECTED:
            self._rejected_count += 1
            self.logger.warning(
                "Submission rejected",
                submitter=self.name,
                loop_id=record.loop_id,
                reason=result.message
            )
        else:
            self._error_count += 1
        return result

    def get_stats(self) -> dict[str, Any]:
        """Get submission statistics."""
        total = self._success_count + self._rejected_count + self._error_count
        return {
            "name": self.name,
            "success_count": self._success_count,
            "rejected_count": self._rejected_count,
            "error_count": self._error_count,
            "success_rate": self._success_count / total if total > 0 else 0.0
        }

    def reset_stats(self):
        """Reset submission statistics."""
        self._success_count = 0
        self._rejected_count = 0
        self._error_count = 0
