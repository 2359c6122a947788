"""Standard output run record submission (dry run)."""

import json
import sys
from datetime import datetime, timezone

from ..config.submission import StdoutSubmissionConfig
from ..errors import SubmissionError
from ..records.builder import RunRecord
from ..utils.time import format_elapsed
from .base import BaseRecordSubmission, SubmissionResult, SubmissionStatus


class StdoutRecordSubmission(BaseRecordSubmission):
    """Prints the payload that would be sent to the ledger."""

    def __init__(self, name: str, config: StdoutSubmissionConfig):
        super().__init__(name, config)
        self.config: StdoutSubmissionConfig = config

    def submit(self, record: RunRecord) -> SubmissionResult:
        """Print the record payload to stdout."""
        try:
            print(self._format_record(record), file=sys.stdout, flush=True)
        except (OSError, ValueError) as e:
            raise SubmissionError(
                f"Stdout error: {str(e)}",
                submitter=self.name,
                loop_id=record.loop_id
            ) from e

        self.logger.info(
            "Run record printed to stdout",
            submitter=self.name,
            loop_id=record.loop_id
        )
        return SubmissionResult(
            status=SubmissionStatus.SUCCESS,
            message=(f"Success! Would submit: Loop {record.loop_id}, "
                     f"Time: {record.elapsed_seconds}s"),
            record=record
        )

    def _format_record(self, record: RunRecord) -> str:
        if self.config.format == "pretty":
            return (f"[{datetime.now(timezone.utc).isoformat()}] RUN: {record.loop_id} "
                    f"time={format_elapsed(record.elapsed_seconds)} "
                    f"distance={record.distance_meters:.0f}m by {record.submitter_address}")

        payload = record.to_payload()
        if self.config.include_timestamp:
            payload["stdout_timestamp"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(payload)

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return sys.stdout.writable()
        except (OSError, ValueError):
            return False
