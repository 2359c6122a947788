"""
Centralized logging configuration for the Strider run tracker.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for run tracker lifecycle events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    return get_logger(name).bind(
        subsystem="run_tracker",
        audit_trail=True
    )


def get_validation_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for loop closure decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for loop validation
    """
    return get_logger(name).bind(
        subsystem="loop_validation",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    session_id: int,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a run lifecycle transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: Sequence number of the run session
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("state_transition")


def log_loop_decision(
    logger: FilteringBoundLogger,
    verdict: str,
    closing_distance: Optional[float],
    threshold: float,
    path_length: int,
    session_id: Optional[int] = None
) -> None:
    """
    Log a loop closure decision with standardized format.

    Invalid loops are logged at warning level, everything else at info.
    """
    bound_logger = logger.bind(
        verdict=verdict,
        closing_distance_m=round(closing_distance, 2) if closing_distance is not None else None,
        threshold_m=threshold,
        path_length=path_length,
    )
    if session_id is not None:
        bound_logger = bound_logger.bind(session_id=session_id)

    if verdict == "invalid":
        bound_logger.warning("loop_decision")
    else:
        bound_logger.info("loop_decision")
