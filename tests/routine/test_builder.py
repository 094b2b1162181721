"""Tests for sequence building from a routine configuration."""

from zen_app.routine.builder import build_sequence, stage_included
from zen_app.routine.models import AlarmTask, SoundId, StageConfig, TimerTask


class TestBuildSequence:
    """Test routine → task sequence expansion."""

    def test_two_round_example(self, example_routine) -> None:
        """Only stage B has a duration: timer then alarm, twice."""
        sequence = build_sequence(example_routine)

        assert sequence.tasks == (
            TimerTask(label="B", duration_seconds=60),
            AlarmTask(label="B complete", duration_seconds=2, sound_id=SoundId.BELL),
            TimerTask(label="B", duration_seconds=60),
            AlarmTask(label="B complete", duration_seconds=2, sound_id=SoundId.BELL),
        )
        assert sequence.total_seconds == 124

    def test_deterministic(self, default_routine) -> None:
        assert build_sequence(default_routine) == build_sequence(default_routine)

    def test_stage_order_within_round(self, routine_factory) -> None:
        config = routine_factory(a=(1, 0, "bell"), b=(2, 0, "bell"), c=(3, 0, "bell"))
        labels = [task.label for task in build_sequence(config)]
        assert labels == ["A", "B", "C"]

    def test_only_first_round_applies_to_stage_a(self, routine_factory) -> None:
        """Stage A with only_first_round appears once, before the first B."""
        config = routine_factory(a=(2, 0, "bell", True), b=(1, 0, "alert"), rounds=3)
        labels = [task.label for task in build_sequence(config)]

        assert labels.count("A") == 1
        assert labels.index("A") < labels.index("B")
        assert labels.count("B") == 3

    def test_stage_a_repeats_without_only_first_round(self, routine_factory) -> None:
        config = routine_factory(a=(2, 0, "bell"), rounds=3)
        assert len(build_sequence(config)) == 3

    def test_only_first_round_ignored_for_other_stages(self, routine_factory) -> None:
        config = routine_factory(b=(1, 0, "alert", True), c=(1, 0, "wood", True), rounds=2)
        labels = [task.label for task in build_sequence(config)]
        assert labels == ["B", "C", "B", "C"]

    def test_zero_duration_stage_contributes_nothing(self, routine_factory) -> None:
        """An alarm configured on a zero-length stage never fires."""
        config = routine_factory(b=(1, 0, "alert"), c=(0, 5, "wood"))
        labels = [task.label for task in build_sequence(config)]

        assert "C" not in labels
        assert "C complete" not in labels

    def test_no_alarm_when_alarm_seconds_zero(self, routine_factory) -> None:
        sequence = build_sequence(routine_factory(b=(1, 0, "alert")))
        assert all(isinstance(task, TimerTask) for task in sequence)

    def test_alarm_carries_stage_sound(self, routine_factory) -> None:
        sequence = build_sequence(routine_factory(c=(1, 3, "wood")))
        alarm = sequence[1]

        assert isinstance(alarm, AlarmTask)
        assert alarm.sound_id == SoundId.WOOD
        assert alarm.duration_seconds == 3
        assert alarm.label == "C complete"

    def test_all_zero_routine_is_empty(self, routine_factory) -> None:
        sequence = build_sequence(routine_factory(rounds=5))
        assert sequence.is_empty
        assert sequence.total_seconds == 0

    def test_default_routine_shape(self, default_routine) -> None:
        sequence = build_sequence(default_routine)
        labels = [task.label for task in sequence]

        assert labels == [
            "A", "A complete", "B", "B complete", "C", "C complete",
            "B", "B complete", "C", "C complete",
        ]
        assert sequence.total_seconds == 120 + 3 + 2 * (900 + 5 + 300 + 3)

    def test_total_is_sum_of_durations(self, default_routine) -> None:
        sequence = build_sequence(default_routine)
        assert sequence.total_seconds == sum(task.duration_seconds for task in sequence)


class TestStageIncluded:
    """Test per-round stage inclusion."""

    def test_zero_duration_excluded(self) -> None:
        assert not stage_included(1, StageConfig(duration_minutes=0, alarm_seconds=3), 0)

    def test_only_first_round_stage_a(self) -> None:
        stage = StageConfig(duration_minutes=1, only_first_round=True)
        assert stage_included(0, stage, 0)
        assert not stage_included(0, stage, 1)

    def test_only_first_round_ignored_after_stage_a(self) -> None:
        stage = StageConfig(duration_minutes=1, only_first_round=True)
        assert stage_included(2, stage, 4)
