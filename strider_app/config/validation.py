"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_SUBMISSION_METHODS = ("stdout", "contest")
VALID_STDOUT_FORMATS = ("json", "pretty")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_loop_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate loop closure parameters."""
        errors = []

        if "closure_threshold_meters" in params:
            value = params["closure_threshold_meters"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="closure_threshold_meters",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_tracking_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate tracking parameters."""
        errors = []

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="tick_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_record_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate run record parameters."""
        errors = []

        if "loop_id_prefix" in params:
            value = params["loop_id_prefix"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="loop_id_prefix",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "loop_id_precision" in params:
            value = params["loop_id_precision"]
            if not _is_int(value) or value < 0 or value > 10:
                errors.append(ValidationError(
                    field="loop_id_precision",
                    message="Must be an integer between 0 and 10",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_submission_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate submission parameters."""
        errors = []

        if "method" in params:
            value = params["method"]
            if value not in VALID_SUBMISSION_METHODS:
                errors.append(ValidationError(
                    field="method",
                    message=f"Must be one of {', '.join(VALID_SUBMISSION_METHODS)}",
                    value=value
                ))

        if "format" in params:
            value = params["format"]
            if value not in VALID_STDOUT_FORMATS:
                errors.append(ValidationError(
                    field="format",
                    message=f"Must be one of {', '.join(VALID_STDOUT_FORMATS)}",
                    value=value
                ))

        if "include_timestamp" in params:
            value = params["include_timestamp"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="include_timestamp",
                    message="Must be a boolean",
                    value=value
                ))

        if "contest_period_days" in params:
            value = params["contest_period_days"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="contest_period_days",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        section_validators = {
            "loop": ConfigValidator.validate_loop_params,
            "tracking": ConfigValidator.validate_tracking_params,
            "record": ConfigValidator.validate_record_params,
            "submission": ConfigValidator.validate_submission_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validate in section_validators.items():
            if section not in config:
                continue
            params = config[section]
            # An empty YAML section ("loop:") loads as None
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            errors.extend(validate(params))

        return errors
