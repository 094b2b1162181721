"""
Display model derived from scheduler snapshots.

Renderers receive a ready-to-show DisplayModel; nothing here touches the
scheduler or collaborators.
"""

import math
from dataclasses import dataclass
from typing import Union

from .scheduler.models import SchedulerSnapshot, SchedulerState
from .utils.time import UNSET_LABEL

READY_LABEL = "READY"
FINISHED_LABEL = "Finished"
DONE_TIMER_TEXT = "DONE"
COMPLETION_TITLE = "All stages complete"


def format_clock(seconds: int) -> str:
    """Seconds as mm:ss; negative values display as 00:00."""
    safe = max(0, int(seconds or 0))
    return f"{safe // 60:02d}:{safe % 60:02d}"


@dataclass(frozen=True)
class DisplayModel:
    """Everything the main screen shows."""
    stage_name: str
    timer_text: str
    progress_percent: float
    step_label: str
    total_minutes: Union[int, str]
    start_label: str
    eta_label: str
    main_button_label: str


def main_button_label(snapshot: SchedulerSnapshot) -> str:
    if snapshot.state == SchedulerState.RUNNING:
        return "Pause"
    if snapshot.state == SchedulerState.IDLE:
        return "Start"
    return "Resume"


def build_display(snapshot: SchedulerSnapshot,
                  start_label: str = UNSET_LABEL,
                  eta_label: str = UNSET_LABEL) -> DisplayModel:
    """Build the display model for one snapshot."""
    if snapshot.finished:
        stage_name = FINISHED_LABEL
    elif snapshot.current_task_label is not None:
        stage_name = snapshot.current_task_label
    else:
        stage_name = READY_LABEL

    return DisplayModel(
        stage_name=stage_name,
        timer_text=DONE_TIMER_TEXT if snapshot.finished else format_clock(snapshot.stage_remaining_seconds),
        progress_percent=min(100.0, max(0.0, snapshot.progress_ratio * 100)),
        step_label=snapshot.step_label,
        total_minutes=math.ceil(snapshot.total_seconds / 60) if snapshot.total_seconds else "--",
        start_label=start_label,
        eta_label=eta_label,
        main_button_label=main_button_label(snapshot),
    )
