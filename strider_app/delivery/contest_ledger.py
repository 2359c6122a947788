"""
In-memory contest ledger.

Keeps one contest per loop id: the first submission opens the contest and
crowns its submitter; a later submission takes the title only with a
strictly better time before the contest ends, which also extends it.
State lives only for the lifetime of the process.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..config.submission import ContestLedgerConfig
from ..records.builder import RunRecord
from ..utils.time import Clock, utc_now
from .base import BaseRecordSubmission, SubmissionResult, SubmissionStatus


@dataclass(frozen=True)
class ContestRecord:
    """Current holder of a loop contest."""
    champion: str
    best_time_seconds: int
    end_timestamp: datetime


class ContestLedger(BaseRecordSubmission):
    """Reference ledger implementing best-time contests per loop."""

    def __init__(self, name: str, config: ContestLedgerConfig, clock: Clock = utc_now):
        super().__init__(name, config)
        self.config: ContestLedgerConfig = config
        self.clock = clock
        self._contests: dict[str, ContestRecord] = {}
        self._lock = threading.Lock()

    @property
    def contest_period(self) -> timedelta:
        return timedelta(days=self.config.contest_period_days)

    def submit(self, record: RunRecord) -> SubmissionResult:
        now = self.clock()
        with self._lock:
            current = self._contests.get(record.loop_id)

            if current is None:
                self._contests[record.loop_id] = ContestRecord(
                    champion=record.submitter_address,
                    best_time_seconds=record.elapsed_seconds,
                    end_timestamp=now + self.contest_period,
                )
                message = f"New contest opened for {record.loop_id} at {record.elapsed_seconds}s"
            elif now >= current.end_timestamp:
                return SubmissionResult(
                    status=SubmissionStatus.REJECTED,
                    message=f"Contest for {record.loop_id} has ended",
                    record=record
                )
            elif record.elapsed_seconds >= current.best_time_seconds:
                return SubmissionResult(
                    status=SubmissionStatus.REJECTED,
                    message=(f"Time {record.elapsed_seconds}s does not beat "
                             f"{current.best_time_seconds}s on {record.loop_id}"),
                    record=record
                )
            else:
                self._contests[record.loop_id] = ContestRecord(
                    champion=record.submitter_address,
                    best_time_seconds=record.elapsed_seconds,
                    end_timestamp=now + self.contest_period,
                )
                message = f"New champion on {record.loop_id} with {record.elapsed_seconds}s"

        self.logger.info(
            "Contest updated",
            submitter=self.name,
            loop_id=record.loop_id,
            champion=record.submitter_address,
            best_time_s=record.elapsed_seconds
        )
        return SubmissionResult(status=SubmissionStatus.SUCCESS, message=message, record=record)

    def get_record(self, loop_id: str) -> Optional[ContestRecord]:
        with self._lock:
            return self._contests.get(loop_id)

    def health_check(self) -> bool:
        return True
