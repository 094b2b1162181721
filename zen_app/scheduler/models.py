"""
Scheduler data models: lifecycle states, run state, snapshots and events.

RunState is immutable and replaced wholesale on every mutation, so a reader
always sees either the state before an operation or the state after it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from ..routine.models import Task, TaskKind, TaskSequence


class SchedulerState(str, Enum):
    """Scheduler lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class EventKind(str, Enum):
    """Kinds of events produced by a poll."""
    TICK = "tick"
    STAGE_CHANGED = "stage_changed"
    FINISHED = "finished"


@dataclass(frozen=True)
class RunState:
    """Position and deadlines of the active run."""

    sequence: TaskSequence
    current_index: int = 0

    # Absolute deadlines (ms); None whenever the run is not ticking
    stage_deadline_ms: Optional[int] = None
    total_deadline_ms: Optional[int] = None

    # Last computed remaining time, in whole seconds
    stage_remaining_seconds: int = 0
    total_remaining_seconds: int = 0

    # Sub-second remainders frozen by pause, consumed by resume
    paused_stage_ms: Optional[int] = None
    paused_total_ms: Optional[int] = None

    running: bool = False
    finished: bool = False

    @property
    def current_task(self) -> Task:
        return self.sequence[self.current_index]

    @property
    def has_next_task(self) -> bool:
        return self.current_index + 1 < len(self.sequence)

    def with_remaining(self, stage_seconds: int, total_seconds: int) -> "RunState":
        """Copy with refreshed remaining-second readings."""
        return replace(
            self,
            stage_remaining_seconds=stage_seconds,
            total_remaining_seconds=total_seconds,
        )


@dataclass(frozen=True)
class SchedulerSnapshot:
    """Read-only view of the scheduler handed to renderers and listeners."""

    state: SchedulerState
    stage_remaining_seconds: int = 0
    total_remaining_seconds: int = 0
    current_task_label: Optional[str] = None
    current_task_kind: Optional[TaskKind] = None
    current_index: int = 0
    sequence_length: int = 0
    total_seconds: int = 0

    @property
    def running(self) -> bool:
        return self.state == SchedulerState.RUNNING

    @property
    def finished(self) -> bool:
        return self.state == SchedulerState.FINISHED

    @property
    def progress_ratio(self) -> float:
        """Fraction of the whole run already elapsed."""
        if self.total_seconds <= 0:
            return 0.0
        return (self.total_seconds - self.total_remaining_seconds) / self.total_seconds

    @property
    def step_label(self) -> str:
        if not self.sequence_length:
            return "0 / 0"
        return f"{min(self.current_index + 1, self.sequence_length)} / {self.sequence_length}"

    @classmethod
    def idle(cls) -> "SchedulerSnapshot":
        return cls(state=SchedulerState.IDLE)

    @classmethod
    def from_run_state(cls, state: SchedulerState, run: RunState) -> "SchedulerSnapshot":
        task = run.current_task
        return cls(
            state=state,
            stage_remaining_seconds=run.stage_remaining_seconds,
            total_remaining_seconds=run.total_remaining_seconds,
            current_task_label=task.label,
            current_task_kind=task.kind,
            current_index=run.current_index,
            sequence_length=len(run.sequence),
            total_seconds=run.sequence.total_seconds,
        )


@dataclass(frozen=True)
class TickEvent:
    """Current stage still has time left."""
    snapshot: SchedulerSnapshot

    @property
    def kind(self) -> EventKind:
        return EventKind.TICK


@dataclass(frozen=True)
class StageChangedEvent:
    """Scheduler advanced onto a new task."""
    snapshot: SchedulerSnapshot
    task: Task
    index: int

    @property
    def kind(self) -> EventKind:
        return EventKind.STAGE_CHANGED


@dataclass(frozen=True)
class FinishedEvent:
    """Last task expired; the run is complete."""
    snapshot: SchedulerSnapshot

    @property
    def kind(self) -> EventKind:
        return EventKind.FINISHED


SchedulerEvent = Union[TickEvent, StageChangedEvent, FinishedEvent]
