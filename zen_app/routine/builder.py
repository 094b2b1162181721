"""
Sequence builder: routine configuration → flat task sequence.

Pure and deterministic. Within a round the order is always A, B, C; stage A
is skipped after the first round when ``only_first_round`` is set, and any
stage with a zero duration contributes nothing for that occurrence.
"""

from ..logging.config import get_logger
from .models import AlarmTask, RoutineConfig, StageConfig, Task, TaskSequence, TimerTask

logger = get_logger(__name__)

ALARM_LABEL_SUFFIX = "complete"


def stage_included(stage_index: int, stage: StageConfig, round_index: int) -> bool:
    """Whether a stage contributes tasks to the given round."""
    if stage.duration_minutes <= 0:
        return False
    if stage_index == 0 and stage.only_first_round:
        return round_index == 0
    return True


def stage_tasks(stage: StageConfig) -> list[Task]:
    """Timer task for a stage, followed by its alarm when one is configured."""
    tasks: list[Task] = [TimerTask(label=stage.name, duration_seconds=stage.duration_seconds)]
    if stage.alarm_seconds > 0:
        tasks.append(AlarmTask(
            label=f"{stage.name} {ALARM_LABEL_SUFFIX}",
            duration_seconds=stage.alarm_seconds,
            sound_id=stage.sound_id,
        ))
    return tasks


def build_sequence(config: RoutineConfig) -> TaskSequence:
    """
    Expand a routine configuration into its ordered task sequence.

    Args:
        config: Routine with three stages, round count and volume

    Returns:
        TaskSequence, possibly empty when every stage duration is zero
    """
    tasks: list[Task] = []

    for round_index in range(config.total_rounds):
        for stage_index, stage in enumerate(config.stages):
            if stage_included(stage_index, stage, round_index):
                tasks.extend(stage_tasks(stage))

    sequence = TaskSequence(tasks=tuple(tasks))

    logger.debug(
        "Sequence built",
        total_rounds=config.total_rounds,
        task_count=len(sequence),
        total_seconds=sequence.total_seconds
    )

    return sequence
