"""
Routine data models: stage configuration, tasks and task sequences.

All structures are frozen; a sequence built for a run never changes, whatever
happens to the configuration it was built from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

STAGE_COUNT = 3
DEFAULT_STAGE_NAMES = ("A", "B", "C")


class SoundId(str, Enum):
    """Alarm timbres understood by the audio service."""
    BELL = "bell"
    WOOD = "wood"
    ALERT = "alert"


class TaskKind(str, Enum):
    """Task variants in a sequence."""
    TIMER = "timer"
    ALARM = "alarm"


@dataclass(frozen=True)
class StageConfig:
    """Configuration of one stage of the routine."""

    duration_minutes: int = 0
    alarm_seconds: int = 0
    sound_id: SoundId = SoundId.ALERT
    only_first_round: bool = False                   # Honoured for stage A only
    name: str = ""

    def __post_init__(self) -> None:
        if self.duration_minutes < 0:
            raise ValueError(f"duration_minutes must be >= 0, got {self.duration_minutes}")
        if self.alarm_seconds < 0:
            raise ValueError(f"alarm_seconds must be >= 0, got {self.alarm_seconds}")

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60


@dataclass(frozen=True)
class RoutineConfig:
    """Complete routine: stages A, B, C plus round count and volume."""

    stages: tuple[StageConfig, StageConfig, StageConfig]
    total_rounds: int = 1
    volume_percent: int = 50

    def __post_init__(self) -> None:
        if len(self.stages) != STAGE_COUNT:
            raise ValueError(f"Routine needs exactly {STAGE_COUNT} stages, got {len(self.stages)}")
        if self.total_rounds < 1:
            raise ValueError(f"total_rounds must be >= 1, got {self.total_rounds}")
        if not 0 <= self.volume_percent <= 100:
            raise ValueError(f"volume_percent must be within 0..100, got {self.volume_percent}")

        # Unnamed stages take their positional letter
        named = tuple(
            stage if stage.name else _renamed(stage, default)
            for stage, default in zip(self.stages, DEFAULT_STAGE_NAMES)
        )
        object.__setattr__(self, "stages", named)

    @property
    def stage_a(self) -> StageConfig:
        return self.stages[0]

    @property
    def stage_b(self) -> StageConfig:
        return self.stages[1]

    @property
    def stage_c(self) -> StageConfig:
        return self.stages[2]


def _renamed(stage: StageConfig, name: str) -> StageConfig:
    return StageConfig(
        duration_minutes=stage.duration_minutes,
        alarm_seconds=stage.alarm_seconds,
        sound_id=stage.sound_id,
        only_first_round=stage.only_first_round,
        name=name,
    )


@dataclass(frozen=True)
class TimerTask:
    """Plain countdown for one stage occurrence."""

    label: str
    duration_seconds: int

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError(f"Timer duration must be >= 0, got {self.duration_seconds}")

    @property
    def kind(self) -> TaskKind:
        return TaskKind.TIMER


@dataclass(frozen=True)
class AlarmTask:
    """Short alert period that follows a stage timer."""

    label: str
    duration_seconds: int
    sound_id: SoundId

    def __post_init__(self) -> None:
        if self.duration_seconds < 1:
            raise ValueError(f"Alarm duration must be >= 1, got {self.duration_seconds}")

    @property
    def kind(self) -> TaskKind:
        return TaskKind.ALARM


Task = Union[TimerTask, AlarmTask]


@dataclass(frozen=True)
class TaskSequence:
    """Ordered, immutable task list for one run."""

    tasks: tuple[Task, ...] = field(default_factory=tuple)

    @property
    def total_seconds(self) -> int:
        return sum(task.duration_seconds for task in self.tasks)

    @property
    def is_empty(self) -> bool:
        return not self.tasks

    def __len__(self) -> int:
        return len(self.tasks)

    def __getitem__(self, index: int) -> Task:
        return self.tasks[index]

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)
