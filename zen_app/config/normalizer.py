"""
Settings normalization: raw settings mapping → typed routine, scheduler and
logging settings.

Form and file input arrive as loosely typed values ("15", "", None, 2.5).
Coercion here is lenient: anything that is not a number becomes zero,
rounds are at least one, volume is clamped to 0..100 and unknown sounds fall
back to the plain alert tone. A section that is not a mapping counts as
absent. Nothing in this module raises for a bad field.
"""

import math
import re
from typing import Any, Mapping

from ..logging.config import get_logger
from ..routine.models import DEFAULT_STAGE_NAMES, RoutineConfig, SoundId, StageConfig
from .defaults import LoggingParams, SchedulerParams

logger = get_logger(__name__)

STAGE_KEYS = ("a", "b", "c")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRUE_STRINGS = {"true", "yes", "on", "1"}


def coerce_int(value: Any, default: int = 0) -> int:
    """Integer prefix of ``value``; ``default`` when there is none."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return default


def coerce_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return default


def coerce_sound(value: Any) -> SoundId:
    try:
        return SoundId(value)
    except ValueError:
        logger.debug("Unknown sound id, using alert", sound=value)
        return SoundId.ALERT


def section(settings: Any, key: str) -> Mapping[str, Any]:
    """Sub-mapping at ``key``; empty when absent or not a mapping."""
    if not isinstance(settings, Mapping):
        return {}
    value = settings.get(key)
    if value is not None and not isinstance(value, Mapping):
        logger.debug("Ignoring non-mapping settings section", section=key, type=type(value).__name__)
        return {}
    return value or {}


def normalize_stage(params: Mapping[str, Any], default_name: str) -> StageConfig:
    """Coerce one stage mapping into a StageConfig."""
    if not isinstance(params, Mapping):
        params = {}
    name = params.get("name")
    return StageConfig(
        duration_minutes=max(0, coerce_int(params.get("duration_minutes"))),
        alarm_seconds=max(0, coerce_int(params.get("alarm_seconds"))),
        sound_id=coerce_sound(params.get("sound")),
        only_first_round=coerce_bool(params.get("only_first_round")),
        name=str(name) if name else default_name,
    )


def normalize_routine_settings(settings: Mapping[str, Any]) -> RoutineConfig:
    """
    Build a RoutineConfig from a merged settings mapping.

    Args:
        settings: Mapping with ``stages`` (keys a, b, c) and ``routine``
            (total_rounds, volume_percent) sections

    Returns:
        RoutineConfig that always satisfies the typed invariants
    """
    stages_section = section(settings, "stages")
    routine_section = section(settings, "routine")

    stages = tuple(
        normalize_stage(section(stages_section, key), default_name)
        for key, default_name in zip(STAGE_KEYS, DEFAULT_STAGE_NAMES)
    )

    # Zero or garbage rounds mean a single round
    total_rounds = max(1, coerce_int(routine_section.get("total_rounds")) or 1)
    volume_percent = min(100, max(0, coerce_int(routine_section.get("volume_percent"))))

    return RoutineConfig(
        stages=stages,  # type: ignore[arg-type]
        total_rounds=total_rounds,
        volume_percent=volume_percent,
    )


def normalize_scheduler_settings(settings: Mapping[str, Any]) -> SchedulerParams:
    """Polling cadence from the ``scheduler`` section; non-positive means default."""
    default = SchedulerParams().poll_interval_ms
    interval = coerce_int(section(settings, "scheduler").get("poll_interval_ms"), default)
    return SchedulerParams(poll_interval_ms=interval if interval > 0 else default)


def normalize_logging_settings(settings: Mapping[str, Any]) -> LoggingParams:
    """Logging level and format from the ``logging`` section."""
    params = section(settings, "logging")
    level = str(params.get("level") or LoggingParams.level).strip().upper()
    if level not in LOG_LEVELS:
        logger.debug("Unknown log level, using default", level=level)
        level = LoggingParams.level
    return LoggingParams(level=level, format_json=coerce_bool(params.get("format_json")))


def routine_to_settings(config: RoutineConfig) -> dict[str, Any]:
    """Inverse of ``normalize_routine_settings`` for writing settings back."""
    return {
        "stages": {
            key: {
                "duration_minutes": stage.duration_minutes,
                "alarm_seconds": stage.alarm_seconds,
                "sound": stage.sound_id.value,
                "only_first_round": stage.only_first_round,
                "name": stage.name,
            }
            for key, stage in zip(STAGE_KEYS, config.stages)
        },
        "routine": {
            "total_rounds": config.total_rounds,
            "volume_percent": config.volume_percent,
        },
    }
