"""
Clock and elapsed-time helpers.

The run tracker takes a clock callable so tests and replays can drive time
explicitly; wall-clock UTC is the default.
"""

import math
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time as a UTC datetime."""
    return datetime.now(timezone.utc)


def elapsed_whole_seconds(start_time: datetime, end_time: Optional[datetime] = None) -> int:
    """
    Whole seconds between two instants, floored and never negative.

    Args:
        start_time: Start instant
        end_time: End instant, defaults to now

    Returns:
        Elapsed time in whole seconds
    """
    if end_time is None:
        end_time = utc_now()

    seconds = (end_time - start_time).total_seconds()
    return max(0, math.floor(seconds))


def format_elapsed(seconds: int) -> str:
    """Format a duration as m:ss, e.g. 754 -> "12:34"."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def format_timestamp(ts: datetime) -> str:
    """ISO8601 string for payloads and logging."""
    return ts.isoformat()
