"""Default configuration parameters for the run tracker."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoopParams:
    """Loop closure parameters."""
    closure_threshold_meters: float = 50.0          # Max start-to-end separation


@dataclass(frozen=True)
class TrackingParams:
    """Tracking session parameters."""
    tick_interval_seconds: float = 1.0              # Elapsed-time refresh period


@dataclass(frozen=True)
class RecordParams:
    """Run record parameters."""
    loop_id_prefix: str = "loop"
    loop_id_precision: int = 4                      # Decimal places of the start coordinate


@dataclass(frozen=True)
class SubmissionParams:
    """Ledger submission parameters."""
    method: str = "stdout"                          # stdout, contest
    format: str = "json"                            # json, pretty (stdout only)
    include_timestamp: bool = True
    contest_period_days: int = 15


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete configuration."""
    loop: LoopParams
    tracking: TrackingParams
    record: RecordParams
    submission: SubmissionParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        loop=LoopParams(),
        tracking=TrackingParams(),
        record=RecordParams(),
        submission=SubmissionParams(),
        logging=LoggingParams(),
    )
