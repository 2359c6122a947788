"""Configuration for ledger submission mechanisms."""

from dataclasses import dataclass
from enum import Enum


class SubmissionMethod(Enum):
    """Supported run record submission methods."""
    STDOUT = "stdout"
    CONTEST = "contest"


@dataclass(frozen=True)
class StdoutSubmissionConfig:
    """Configuration for stdout (dry-run) submission."""
    format: str = "json"  # json, pretty
    include_timestamp: bool = True


@dataclass(frozen=True)
class ContestLedgerConfig:
    """Configuration for the in-memory contest ledger."""
    contest_period_days: int = 15
