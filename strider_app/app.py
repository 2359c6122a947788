"""
Main run tracking coordinator.

Wires configuration, the run tracker, the record builder, the submitter
identity and the ledger submission collaborator behind the handful of
actions a runner performs: connect, start, stop, submit.
"""

from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .delivery.base import BaseRecordSubmission, SubmissionResult, SubmissionStatus
from .delivery.factory import create_submission
from .errors import LoopInvalidError, SubmissionPreconditionError
from .identity import IdentityProvider, abbreviate_address
from .logging.config import configure_logging
from .records.builder import RunRecordBuilder
from .tracking.models import RunSnapshot
from .tracking.sources import BasePositionSource, BaseTicker, ThreadingTicker
from .tracking.tracker import RunTracker
from .utils.time import Clock, utc_now
from .validation.loop import LoopOutcome, LoopValidator

logger = structlog.get_logger(__name__)


class StriderApp:
    """
    Coordinator for one runner's loop runs.

    Manages the pipeline:
    Position stream → RunTracker → LoopValidator → RunRecordBuilder → Ledger
    """

    def __init__(
        self,
        position_source: BasePositionSource,
        ticker: Optional[BaseTicker] = None,
        config: Optional[DefaultConfig] = None,
        config_dir: Optional[Path] = None,
        overrides: Optional[dict[str, Any]] = None,
        submission: Optional[BaseRecordSubmission] = None,
        clock: Clock = utc_now
    ) -> None:
        self.logger = logger
        self.config = config or ConfigLoader.create(config_dir).load(overrides)
        configure_logging(
            level=self.config.logging.level,
            format_json=self.config.logging.format_json
        )

        validator = LoopValidator(
            threshold_meters=self.config.loop.closure_threshold_meters
        )
        self.tracker = RunTracker(
            position_source,
            ticker or ThreadingTicker(),
            clock=clock,
            validator=validator,
            tick_interval_seconds=self.config.tracking.tick_interval_seconds
        )
        self.builder = RunRecordBuilder(
            validator,
            loop_id_prefix=self.config.record.loop_id_prefix,
            loop_id_precision=self.config.record.loop_id_precision
        )
        self.submission = submission or create_submission(self.config.submission, clock)
        self.submitter_address: Optional[str] = None
        self.last_message: Optional[str] = None

        self.logger.info(
            "Strider app initialized",
            submission=self.submission.name,
            closure_threshold_m=validator.threshold_meters
        )

    def connect_identity(self, provider: IdentityProvider) -> str:
        """Fetch the submitter address from an identity collaborator."""
        try:
            address = provider.get_address()
        except Exception as e:
            self.logger.error("Identity provider failed", error=str(e), exc_info=True)
            return self._report(f"Error connecting wallet: {e}")

        if not address:
            self.submitter_address = None
            return self._report("Please install or unlock a wallet to submit runs")

        self.submitter_address = address
        self.logger.info("Submitter identity connected", address=abbreviate_address(address))
        return self._report(f"Wallet Connected: {abbreviate_address(address)}")

    def start_run(self) -> RunSnapshot:
        snapshot = self.tracker.start()
        if snapshot.status is not None:
            self._report(snapshot.status.message)
        return snapshot

    def stop_run(self) -> Optional[LoopOutcome]:
        outcome = self.tracker.stop()
        status = self.tracker.snapshot().status
        if outcome is not None and status is not None:
            self._report(status.message)
        return outcome

    def snapshot(self) -> RunSnapshot:
        return self.tracker.snapshot()

    def submit_run(self) -> SubmissionResult:
        """
        Build a record for the last stopped run and hand it to the ledger.

        Precondition failures are returned as REJECTED results, never raised.
        """
        if not self.submitter_address:
            error = SubmissionPreconditionError(
                "Please connect wallet first",
                precondition="submitter_identity"
            )
            return self._rejected(error, error.message)

        snapshot = self.tracker.snapshot()
        try:
            record = self.builder.build(snapshot, self.submitter_address)
        except LoopInvalidError as e:
            return self._rejected(e, "Cannot submit invalid loop")
        except SubmissionPreconditionError as e:
            return self._rejected(e, e.message)

        self._report(f"Submitting... Loop ID: {record.loop_id}, Time: {record.elapsed_seconds}s")
        result = self.submission.submit_once(record)

        self.logger.info(
            "Run submission finished",
            loop_id=record.loop_id,
            status=result.status.value,
            submission_time_ms=result.submission_time_ms
        )
        self._report(result.message or result.status.value)
        return result

    def _rejected(self, error: Exception, message: str) -> SubmissionResult:
        self.logger.warning(
            "Run submission refused",
            reason=message,
            precondition=getattr(error, "precondition", None)
        )
        self._report(message)
        return SubmissionResult(status=SubmissionStatus.REJECTED, message=message, error=error)

    def _report(self, message: str) -> str:
        self.last_message = message
        return message
