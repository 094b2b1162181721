"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any, Mapping

from ..routine.models import SoundId

VALID_SOUNDS = {sound.value for sound in SoundId}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates raw settings before they are coerced."""

    @staticmethod
    def validate_stage_params(params: dict[str, Any], stage_key: str) -> list[ValidationError]:
        """Validate one stage section."""
        errors = []

        for name in ("duration_minutes", "alarm_seconds"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"stages.{stage_key}.{name}",
                        message="Must be a non-negative integer",
                        value=value
                    ))

        if "sound" in params and params["sound"] not in VALID_SOUNDS:
            errors.append(ValidationError(
                field=f"stages.{stage_key}.sound",
                message=f"Must be one of {sorted(VALID_SOUNDS)}",
                value=params["sound"]
            ))

        if "only_first_round" in params:
            value = params["only_first_round"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field=f"stages.{stage_key}.only_first_round",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_routine_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate round count and volume."""
        errors = []

        if "total_rounds" in params:
            value = params["total_rounds"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="routine.total_rounds",
                    message="Must be a positive integer",
                    value=value
                ))

        if "volume_percent" in params:
            value = params["volume_percent"]
            if not _is_int(value) or not 0 <= value <= 100:
                errors.append(ValidationError(
                    field="routine.volume_percent",
                    message="Must be an integer between 0 and 100",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_scheduler_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate polling cadence."""
        errors = []

        if "poll_interval_ms" in params:
            value = params["poll_interval_ms"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="scheduler.poll_interval_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate log level and output format."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {sorted(VALID_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ValidationError(
                field="logging.format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors: list[ValidationError] = []

        stages = _mapping_section(config, "stages", "stages", errors)
        for stage_key in ("a", "b", "c"):
            params = _mapping_section(stages, stage_key, f"stages.{stage_key}", errors)
            if params:
                errors.extend(ConfigValidator.validate_stage_params(dict(params), stage_key))

        section_validators = (
            ("routine", ConfigValidator.validate_routine_params),
            ("scheduler", ConfigValidator.validate_scheduler_params),
            ("logging", ConfigValidator.validate_logging_params),
        )
        for key, validate in section_validators:
            params = _mapping_section(config, key, key, errors)
            if params:
                errors.extend(validate(dict(params)))

        return errors


def _mapping_section(parent: Mapping[str, Any], key: str, field: str,
                     errors: list[ValidationError]) -> Mapping[str, Any]:
    """Sub-mapping at ``key``; records an error when it is present but not a mapping."""
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        errors.append(ValidationError(field=field, message="Must be a mapping", value=value))
        return {}
    return value
