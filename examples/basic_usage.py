#!/usr/bin/env python3
"""
Basic Usage Example - Staged Countdown Sequencer

This script demonstrates the basic usage of the sequencer with a simulated
clock. It shows how to:
- Build a routine configuration from a settings mapping
- Drive the controller through start, pause, resume and finish
- React to stage changes through the alert collaborators
- Log an output record and export the production log as CSV

Run: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path

from zen_app.alerts.audio import LoggingToneSink, ToneAlertService
from zen_app.alerts.notification import LoggingNotificationDisplay
from zen_app.config.normalizer import normalize_routine_settings
from zen_app.controller import SequenceController
from zen_app.logging.config import configure_logging
from zen_app.persistence.output_log import OutputLogStore
from zen_app.scheduler.engine import SequenceScheduler
from zen_app.scheduler.models import StageChangedEvent

POLL_MS = 250


class SimulatedClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start_ms: int = 0):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


def main() -> None:
    configure_logging(level="WARNING")

    settings = {
        "stages": {
            "a": {"duration_minutes": "1", "alarm_seconds": "2", "sound": "bell", "only_first_round": True},
            "b": {"duration_minutes": "2", "alarm_seconds": "3", "sound": "alert"},
            "c": {"duration_minutes": "0", "alarm_seconds": "3", "sound": "wood"},
        },
        "routine": {"total_rounds": "2", "volume_percent": "60"},
    }
    config = normalize_routine_settings(settings)

    clock = SimulatedClock()
    sink = LoggingToneSink()
    notifications = LoggingNotificationDisplay()
    controller = SequenceController(
        config,
        audio=ToneAlertService(sink_factory=lambda: sink),
        notifications=notifications,
        scheduler=SequenceScheduler(clock=clock),
        loop_factory=None,
    )

    snapshot = controller.toggle()
    display = controller.display()
    print(f"▶️  Started: {snapshot.sequence_length} tasks, {snapshot.total_seconds}s "
          f"(start {display.start_label}, ETA {display.eta_label})")

    # Pause for ten simulated minutes halfway through the first task
    clock.advance(30_000)
    controller.poll()
    controller.toggle()
    clock.advance(600_000)
    controller.toggle()
    print(f"⏯️  Resumed with {controller.snapshot().total_remaining_seconds}s remaining")

    while not controller.snapshot().finished:
        clock.advance(POLL_MS)
        event = controller.poll()
        if isinstance(event, StageChangedEvent):
            display = controller.display()
            overlay = f" 🔔 {notifications.title}" if notifications.active else ""
            print(f"  [{display.step_label}] {display.stage_name:<12} {display.timer_text}{overlay}")

    display = controller.display()
    print(f"✅ {display.stage_name}: {display.timer_text}, progress {display.progress_percent:.0f}%, "
          f"{len(sink.scheduled)} alarm beats scheduled")

    with tempfile.TemporaryDirectory() as tmp:
        store = OutputLogStore(db_path=str(Path(tmp) / "output_log.db"))
        store.add_record(left_ml=45, right_ml=50.5)
        path = store.export_csv_file(Path(tmp))
        print(f"📄 Exported {path.name if path else 'nothing'}")


if __name__ == "__main__":
    main()
