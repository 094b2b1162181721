"""End-to-end runs: settings file → routine → controller → alerts."""

from unittest.mock import Mock

import pytest

from zen_app.alerts.audio import LoggingToneSink, ToneAlertService
from zen_app.alerts.notification import LoggingNotificationDisplay
from zen_app.config.loader import ConfigLoader
from zen_app.controller import SequenceController
from zen_app.presentation import COMPLETION_TITLE
from zen_app.routine.builder import build_sequence
from zen_app.scheduler.engine import SequenceScheduler
from zen_app.scheduler.models import EventKind, SchedulerState


@pytest.fixture
def loader(tmp_path):
    return ConfigLoader.create(tmp_path)


class TestFullRun:
    """Test a complete run with in-memory collaborators."""

    def test_example_routine_runs_to_completion(self, example_routine, clock, fixed_wall_clock) -> None:
        """Every boundary is reported once and both alarms sound."""
        sink = LoggingToneSink()
        audio = ToneAlertService(sink_factory=lambda: sink)
        notifications = LoggingNotificationDisplay()
        controller = SequenceController(
            example_routine,
            audio=audio,
            notifications=notifications,
            scheduler=SequenceScheduler(clock=clock),
            loop_factory=None,
            wall_clock=fixed_wall_clock,
        )

        controller.toggle()
        kinds = []
        while controller.state == SchedulerState.RUNNING:
            event = controller.poll(clock.advance(250))
            if event.kind != EventKind.TICK:
                kinds.append(event.kind)

        assert kinds == [EventKind.STAGE_CHANGED] * 3 + [EventKind.FINISHED]
        assert len(sink.scheduled) == 4
        assert all(beat.gain == pytest.approx(0.6) for beat in sink.scheduled)
        assert notifications.active
        assert notifications.title == COMPLETION_TITLE
        assert controller.display().timer_text == "DONE"
        assert clock.now_ms - 1_000_000 == 124000

    def test_pause_mid_run_extends_finish(self, example_routine, clock) -> None:
        controller = SequenceController(
            example_routine,
            audio=Mock(),
            notifications=LoggingNotificationDisplay(),
            scheduler=SequenceScheduler(clock=clock),
            loop_factory=None,
        )
        start = clock.now_ms

        controller.toggle()
        controller.poll(clock.advance(30000))
        controller.toggle()
        clock.advance(45000)
        controller.toggle()

        while controller.state == SchedulerState.RUNNING:
            controller.poll(clock.advance(1000))

        assert clock.now_ms - start == 124000 + 45000


class TestSettingsPersistence:
    """Test that a fresh start writes the active routine back."""

    def test_fresh_start_saves_settings(self, loader, example_routine, clock) -> None:
        controller = SequenceController(
            example_routine,
            audio=Mock(),
            scheduler=SequenceScheduler(clock=clock),
            settings_sink=loader.save_routine_settings,
            loop_factory=None,
        )

        controller.toggle()

        assert loader.load_routine() == example_routine
        assert build_sequence(loader.load_routine()).total_seconds == 124

    def test_loaded_routine_drives_controller(self, loader, clock) -> None:
        loader.settings_path.write_text(
            "stages:\n"
            "  a: {duration_minutes: 0}\n"
            "  b: {duration_minutes: 1, alarm_seconds: 2, sound: bell}\n"
            "  c: {duration_minutes: 0}\n"
            "routine: {total_rounds: 2}\n"
        )
        controller = SequenceController(
            loader.load_routine(),
            audio=Mock(),
            scheduler=SequenceScheduler(clock=clock),
            loop_factory=None,
        )

        snapshot = controller.toggle()

        assert snapshot.total_remaining_seconds == 124
        assert snapshot.sequence_length == 4
