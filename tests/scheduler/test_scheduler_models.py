"""Tests for scheduler snapshots and run state."""

from zen_app.routine.models import TaskKind
from zen_app.scheduler.models import RunState, SchedulerSnapshot, SchedulerState


class TestSchedulerSnapshot:
    """Test derived snapshot fields."""

    def test_idle_snapshot(self) -> None:
        snapshot = SchedulerSnapshot.idle()

        assert snapshot.state == SchedulerState.IDLE
        assert snapshot.current_task_label is None
        assert snapshot.progress_ratio == 0.0
        assert snapshot.step_label == "0 / 0"
        assert not snapshot.running
        assert not snapshot.finished

    def test_from_run_state(self, short_sequence) -> None:
        run = RunState(sequence=short_sequence, current_index=1,
                       stage_remaining_seconds=2, total_remaining_seconds=5, running=True)

        snapshot = SchedulerSnapshot.from_run_state(SchedulerState.RUNNING, run)

        assert snapshot.running
        assert snapshot.current_task_label == "A complete"
        assert snapshot.current_task_kind == TaskKind.ALARM
        assert snapshot.sequence_length == 3
        assert snapshot.total_seconds == 10
        assert snapshot.step_label == "2 / 3"
        assert snapshot.progress_ratio == 0.5

    def test_step_label_clamped_to_length(self) -> None:
        snapshot = SchedulerSnapshot(state=SchedulerState.FINISHED, current_index=5, sequence_length=3)
        assert snapshot.step_label == "3 / 3"

    def test_zero_total_has_no_progress(self) -> None:
        snapshot = SchedulerSnapshot(state=SchedulerState.RUNNING, sequence_length=1)
        assert snapshot.progress_ratio == 0.0


class TestRunState:
    """Test run state helpers."""

    def test_current_and_next_task(self, short_sequence) -> None:
        run = RunState(sequence=short_sequence, current_index=2)

        assert run.current_task.label == "B"
        assert not run.has_next_task
        assert RunState(sequence=short_sequence).has_next_task

    def test_with_remaining_returns_copy(self, short_sequence) -> None:
        run = RunState(sequence=short_sequence, stage_remaining_seconds=5)
        updated = run.with_remaining(3, 8)

        assert updated is not run
        assert run.stage_remaining_seconds == 5
        assert (updated.stage_remaining_seconds, updated.total_remaining_seconds) == (3, 8)
