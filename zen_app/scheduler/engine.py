"""
Drift-corrected scheduler for a task sequence.

Remaining time is always derived as ``deadline - now`` from absolute deadlines
captured when a task begins (or the run resumes), never by decrementing a
counter per poll. A poll that arrives late therefore reports the true
remaining time instead of lagging behind it.

Lifecycle: IDLE → RUNNING ⇄ PAUSED → FINISHED, and ``reset`` → IDLE from any
state. Each poll crosses at most one task boundary, so every boundary yields
its own event even when polling is slow or tasks have zero length.
"""

from dataclasses import replace
from typing import Optional

from ..errors import EmptySequenceError, InvalidStateTransitionError
from ..logging.config import get_scheduler_logger, log_stage_transition
from ..routine.models import TaskSequence
from ..utils.time import Clock, monotonic_ms, remaining_ms, remaining_seconds
from .models import (
    FinishedEvent,
    RunState,
    SchedulerEvent,
    SchedulerSnapshot,
    SchedulerState,
    StageChangedEvent,
    TickEvent,
)

state_logger = get_scheduler_logger(__name__)


class SequenceScheduler:
    """Owns the run state of one task sequence and advances it in time."""

    def __init__(self, clock: Clock = monotonic_ms):
        self.logger = state_logger
        self._clock = clock
        self._state = SchedulerState.IDLE
        self._run: Optional[RunState] = None

    # ----- Accessors -----
    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def run_state(self) -> Optional[RunState]:
        return self._run

    def snapshot(self) -> SchedulerSnapshot:
        if self._run is None:
            return SchedulerSnapshot.idle()
        return SchedulerSnapshot.from_run_state(self._state, self._run)

    # ----- Lifecycle -----
    def start(self, sequence: TaskSequence, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        """
        Begin a run at the first task of ``sequence``.

        Raises:
            EmptySequenceError: sequence has no tasks
            InvalidStateTransitionError: a run is already running or paused
        """
        if sequence.is_empty:
            raise EmptySequenceError(
                "Cannot start an empty sequence",
                context={"state": self._state.value}
            )
        self._require_state("start", SchedulerState.IDLE, SchedulerState.FINISHED)

        now = self._now(now_ms)
        first = sequence[0]
        total = sequence.total_seconds

        self._run = RunState(
            sequence=sequence,
            current_index=0,
            stage_deadline_ms=now + first.duration_seconds * 1000,
            total_deadline_ms=now + total * 1000,
            stage_remaining_seconds=first.duration_seconds,
            total_remaining_seconds=total,
            running=True,
        )
        self._transition(SchedulerState.RUNNING, "start", {
            "task_count": len(sequence),
            "total_seconds": total,
            "first_task": first.label,
        })
        return self.snapshot()

    def pause(self, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        """Freeze remaining time and disarm both deadlines."""
        self._require_state("pause", SchedulerState.RUNNING)
        assert self._run is not None

        now = self._now(now_ms)
        run = self._run
        stage_ms = remaining_ms(run.stage_deadline_ms, now)
        total_ms = remaining_ms(run.total_deadline_ms, now)

        self._run = replace(
            run,
            stage_deadline_ms=None,
            total_deadline_ms=None,
            paused_stage_ms=stage_ms,
            paused_total_ms=total_ms,
            stage_remaining_seconds=remaining_seconds(stage_ms, 0),
            total_remaining_seconds=remaining_seconds(total_ms, 0),
            running=False,
        )
        self._transition(SchedulerState.PAUSED, "pause", {
            "current_index": run.current_index,
            "stage_remaining_ms": stage_ms,
            "total_remaining_ms": total_ms,
        })
        return self.snapshot()

    def resume(self, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        """Re-arm deadlines from the remaining time frozen by ``pause``."""
        self._require_state("resume", SchedulerState.PAUSED)
        assert self._run is not None

        now = self._now(now_ms)
        run = self._run
        stage_ms = run.paused_stage_ms or 0
        total_ms = run.paused_total_ms or 0

        self._run = replace(
            run,
            stage_deadline_ms=now + stage_ms,
            total_deadline_ms=now + total_ms,
            paused_stage_ms=None,
            paused_total_ms=None,
            running=True,
        )
        self._transition(SchedulerState.RUNNING, "resume", {
            "current_index": run.current_index,
            "stage_remaining_ms": stage_ms,
            "total_remaining_ms": total_ms,
        })
        return self.snapshot()

    def reset(self) -> SchedulerSnapshot:
        """Discard the run and return to IDLE. Safe to call repeatedly."""
        if self._state != SchedulerState.IDLE or self._run is not None:
            previous = self._state
            self._run = None
            self._state = SchedulerState.IDLE
            log_stage_transition(
                self.logger,
                from_state=previous.value,
                to_state=SchedulerState.IDLE.value,
                trigger="reset",
            )
        return self.snapshot()

    # ----- Polling -----
    def poll(self, now_ms: Optional[int] = None) -> Optional[SchedulerEvent]:
        """
        Recompute remaining time and advance past an expired task.

        Args:
            now_ms: Tick timestamp; defaults to the scheduler clock

        Returns:
            TickEvent while the current task has time left, StageChangedEvent
            or FinishedEvent when a boundary was crossed, None when the
            scheduler is not running (state is left untouched)
        """
        if self._state != SchedulerState.RUNNING or self._run is None:
            return None

        now = self._now(now_ms)
        run = self._run.with_remaining(
            remaining_seconds(self._run.stage_deadline_ms, now),
            remaining_seconds(self._run.total_deadline_ms, now),
        )

        if run.stage_remaining_seconds > 0:
            self._run = run
            return TickEvent(snapshot=self.snapshot())

        return self._advance(run, now)

    def _advance(self, run: RunState, now: int) -> SchedulerEvent:
        if run.has_next_task:
            next_index = run.current_index + 1
            task = run.sequence[next_index]
            # The next task's clock starts at the tick that expired the previous one
            self._run = replace(
                run,
                current_index=next_index,
                stage_deadline_ms=now + task.duration_seconds * 1000,
                stage_remaining_seconds=task.duration_seconds,
            )
            log_stage_transition(
                self.logger,
                from_state=SchedulerState.RUNNING.value,
                to_state=SchedulerState.RUNNING.value,
                trigger="advance",
                context={
                    "from_index": run.current_index,
                    "to_index": next_index,
                    "task_label": task.label,
                    "task_kind": task.kind.value,
                    "duration_seconds": task.duration_seconds,
                    "total_remaining_seconds": run.total_remaining_seconds,
                }
            )
            return StageChangedEvent(snapshot=self.snapshot(), task=task, index=next_index)

        self._run = replace(
            run,
            stage_remaining_seconds=0,
            total_remaining_seconds=0,
            stage_deadline_ms=None,
            total_deadline_ms=None,
            running=False,
            finished=True,
        )
        self._transition(SchedulerState.FINISHED, "sequence_complete", {
            "task_count": len(run.sequence),
        })
        return FinishedEvent(snapshot=self.snapshot())

    # ----- Internals -----
    def _now(self, now_ms: Optional[int]) -> int:
        return self._clock() if now_ms is None else now_ms

    def _require_state(self, operation: str, *allowed: SchedulerState) -> None:
        if self._state not in allowed:
            raise InvalidStateTransitionError(
                f"Cannot {operation} while {self._state.value}",
                current_state=self._state.value,
                attempted_transition=operation,
                context={"allowed_states": [state.value for state in allowed]}
            )

    def _transition(self, new_state: SchedulerState, trigger: str, context: dict) -> None:
        previous = self._state
        self._state = new_state
        log_stage_transition(
            self.logger,
            from_state=previous.value,
            to_state=new_state.value,
            trigger=trigger,
            context=context
        )
