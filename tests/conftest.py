"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime
from typing import Callable, Optional, Tuple

from zen_app.routine.models import (
    AlarmTask, RoutineConfig, SoundId, StageConfig, TaskSequence, TimerTask
)

T0 = 1_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = T0):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> int:
        self.now_ms += ms
        return self.now_ms

    def set(self, ms: int) -> int:
        self.now_ms = ms
        return self.now_ms


StageTuple = Tuple  # (minutes, alarm_seconds, sound[, only_first_round])


def _stage(values: Optional[StageTuple]) -> StageConfig:
    if values is None:
        return StageConfig()
    minutes, alarm, sound, *rest = values
    return StageConfig(
        duration_minutes=minutes,
        alarm_seconds=alarm,
        sound_id=SoundId(sound),
        only_first_round=bool(rest and rest[0]),
    )


def make_routine(a: Optional[StageTuple] = None, b: Optional[StageTuple] = None,
                 c: Optional[StageTuple] = None, rounds: int = 1, volume: int = 50) -> RoutineConfig:
    """Routine from compact stage tuples; omitted stages are zero-length."""
    return RoutineConfig(
        stages=(_stage(a), _stage(b), _stage(c)),
        total_rounds=rounds,
        volume_percent=volume,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fake millisecond clock starting at T0."""
    return FakeClock()


@pytest.fixture
def routine_factory() -> Callable[..., RoutineConfig]:
    """Factory building routines from compact stage tuples."""
    return make_routine


@pytest.fixture
def example_routine() -> RoutineConfig:
    """A: 0 min, B: 1 min with a 2 s bell alarm, C: 0 min, two rounds."""
    return make_routine(b=(1, 2, "bell"), rounds=2, volume=60)


@pytest.fixture
def default_routine() -> RoutineConfig:
    """Routine matching the shipped defaults."""
    return make_routine(
        a=(2, 3, "bell", True),
        b=(15, 5, "alert"),
        c=(5, 3, "wood"),
        rounds=2,
        volume=50,
    )


@pytest.fixture
def short_sequence() -> TaskSequence:
    """Timer 5 s → bell alarm 2 s → timer 3 s (10 s in total)."""
    return TaskSequence(tasks=(
        TimerTask(label="A", duration_seconds=5),
        AlarmTask(label="A complete", duration_seconds=2, sound_id=SoundId.BELL),
        TimerTask(label="B", duration_seconds=3),
    ))


@pytest.fixture
def fixed_wall_clock() -> Callable[[], datetime]:
    """Wall clock frozen at 2024-01-01 08:00."""
    return lambda: datetime(2024, 1, 1, 8, 0, 0)
