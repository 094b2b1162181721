"""Default configuration parameters for the sequencer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StageParams:
    """One stage of the routine."""
    duration_minutes: int = 0
    alarm_seconds: int = 0
    sound: str = "alert"                             # bell | wood | alert
    only_first_round: bool = False                   # Stage A only
    name: str = ""                                   # Task label; empty means A/B/C


@dataclass(frozen=True)
class StageSet:
    """The three fixed stages."""
    a: StageParams
    b: StageParams
    c: StageParams


@dataclass(frozen=True)
class RoutineParams:
    """Round count and alarm volume."""
    total_rounds: int = 2
    volume_percent: int = 50


@dataclass(frozen=True)
class SchedulerParams:
    """Polling cadence for the scheduler loop."""
    poll_interval_ms: int = 250


@dataclass(frozen=True)
class LoggingParams:
    """Logging output settings."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    stages: StageSet
    routine: RoutineParams
    scheduler: SchedulerParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        stages=StageSet(
            a=StageParams(duration_minutes=2, alarm_seconds=3, sound="bell", only_first_round=True),
            b=StageParams(duration_minutes=15, alarm_seconds=5, sound="alert"),
            c=StageParams(duration_minutes=5, alarm_seconds=3, sound="wood"),
        ),
        routine=RoutineParams(),
        scheduler=SchedulerParams(),
        logging=LoggingParams(),
    )
