#!/usr/bin/env python3
"""
Drift Correction Demo

Shows that the scheduler reports the same boundaries regardless of how often
it is polled, and that a badly delayed poll yields exactly one event instead
of a burst of skipped ones or a negative countdown.

Run: python examples/drift_correction_demo.py
"""

from zen_app.logging.config import configure_logging
from zen_app.routine.models import AlarmTask, SoundId, TaskSequence, TimerTask
from zen_app.scheduler.engine import SequenceScheduler


def run_with_cadence(sequence: TaskSequence, cadence_ms: int) -> list[str]:
    scheduler = SequenceScheduler()
    now = 0
    scheduler.start(sequence, now_ms=now)
    events = ["start"]
    while not scheduler.snapshot().finished:
        now += cadence_ms
        event = scheduler.poll(now_ms=now)
        if event is not None and event.kind.value != "tick":
            events.append(f"{event.kind.value}@{now / 1000:.2f}s")
    return events


def main() -> None:
    configure_logging(level="WARNING")

    sequence = TaskSequence(tasks=(
        TimerTask(label="B", duration_seconds=5),
        AlarmTask(label="B complete", duration_seconds=2, sound_id=SoundId.BELL),
        TimerTask(label="C", duration_seconds=3),
    ))

    for cadence in (50, 250, 1000):
        print(f"⏱️  every {cadence:>4} ms: {' → '.join(run_with_cadence(sequence, cadence))}")

    scheduler = SequenceScheduler()
    scheduler.start(sequence, now_ms=0)
    event = scheduler.poll(now_ms=7_000)
    snapshot = scheduler.snapshot()
    print(f"💤 Missed ticks until 7s: one {event.kind.value if event else 'no'} event, "
          f"now on '{snapshot.current_task_label}' with {snapshot.total_remaining_seconds}s of run left")


if __name__ == "__main__":
    main()
