"""
Sequence controller.

Orchestrates the scheduler lifecycle in response to user intent and forwards
scheduler events to the alert collaborators:

    toggle/reset → Scheduler → (Tick | StageChanged | Finished)
                 → audio alert / notification / listener snapshots
"""

import threading
from datetime import datetime
from typing import Any, Callable, Optional

from .alerts.audio import AudioAlertService, get_audio_service
from .alerts.notification import LoggingNotificationDisplay, NotificationDisplay
from .config.loader import ConfigLoader
from .config.normalizer import (
    normalize_logging_settings,
    normalize_routine_settings,
    normalize_scheduler_settings,
)
from .errors import EmptySequenceError, InvalidStateTransitionError
from .logging.config import configure_logging, get_logger
from .presentation import COMPLETION_TITLE, DisplayModel, build_display
from .routine.builder import build_sequence
from .routine.models import AlarmTask, RoutineConfig
from .scheduler.engine import SequenceScheduler
from .scheduler.loop import DEFAULT_POLL_INTERVAL_MS, PollingLoop
from .scheduler.models import (
    FinishedEvent,
    SchedulerEvent,
    SchedulerSnapshot,
    SchedulerState,
    StageChangedEvent,
)
from .utils.time import UNSET_LABEL, eta_label, format_clock_label

logger = get_logger(__name__)

SnapshotListener = Callable[[SchedulerSnapshot], None]
LoopFactory = Callable[[Callable[[], None], int], PollingLoop]


class SequenceController:
    """
    Façade over one scheduler and its polling loop.

    All operations are serialised by a re-entrant lock. The polling loop is
    recreated on every start/resume and dropped on pause, finish, reset and
    close; a callback from a dropped loop is ignored.
    """

    def __init__(
        self,
        config: RoutineConfig,
        audio: Optional[AudioAlertService] = None,
        notifications: Optional[NotificationDisplay] = None,
        settings_sink: Optional[Callable[[RoutineConfig], None]] = None,
        scheduler: Optional[SequenceScheduler] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        loop_factory: Optional[LoopFactory] = PollingLoop,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Args:
            config: Routine used for the next fresh start
            audio: Alarm sound service; the process-wide service when omitted
            notifications: Stage-change overlay
            settings_sink: Receives the configuration on every fresh start
            scheduler: Scheduler to drive (a new one by default)
            poll_interval_ms: Cadence of the polling loop
            loop_factory: Builds polling loops; None means the caller polls
            wall_clock: Source of the start-time and ETA labels
        """
        self.logger = logger
        self._lock = threading.RLock()
        self._config = config
        self._run_config: Optional[RoutineConfig] = None
        self._audio = audio
        self.notifications = notifications or LoggingNotificationDisplay()
        self._settings_sink = settings_sink
        self.scheduler = scheduler or SequenceScheduler()
        self.poll_interval_ms = poll_interval_ms
        self._loop_factory = loop_factory
        self._wall_clock = wall_clock
        self._loop: Optional[PollingLoop] = None
        self._listeners: list[SnapshotListener] = []

        self.start_label = UNSET_LABEL
        self.eta_label = UNSET_LABEL

    @classmethod
    def from_loader(
        cls,
        loader: ConfigLoader,
        overrides: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "SequenceController":
        """
        Build a controller from merged settings.

        Applies the ``logging`` section through ``configure_logging`` and the
        ``scheduler`` section as the polling cadence. Fresh starts write the
        routine back through ``loader`` unless ``settings_sink`` is given.

        Args:
            loader: Source of defaults and the saved settings file
            overrides: Highest-priority settings for this controller
            **kwargs: Remaining constructor arguments (collaborators, clocks)
        """
        settings = loader.merge_config(overrides)

        logging_params = normalize_logging_settings(settings)
        configure_logging(level=logging_params.level, format_json=logging_params.format_json)

        scheduler_params = normalize_scheduler_settings(settings)
        kwargs.setdefault("settings_sink", loader.save_routine_settings)
        kwargs.setdefault("poll_interval_ms", scheduler_params.poll_interval_ms)

        controller = cls(normalize_routine_settings(settings), **kwargs)
        controller.logger.info(
            "Controller configured",
            settings_path=str(loader.settings_path),
            poll_interval_ms=controller.poll_interval_ms,
            log_level=logging_params.level
        )
        return controller

    # ----- Accessors -----
    @property
    def audio(self) -> AudioAlertService:
        if self._audio is None:
            self._audio = get_audio_service()
        return self._audio

    @property
    def config(self) -> RoutineConfig:
        return self._config

    @property
    def state(self) -> SchedulerState:
        return self.scheduler.state

    @property
    def is_polling(self) -> bool:
        return self._loop is not None

    def snapshot(self) -> SchedulerSnapshot:
        return self.scheduler.snapshot()

    def display(self) -> DisplayModel:
        with self._lock:
            return build_display(self.snapshot(), self.start_label, self.eta_label)

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update_config(self, config: RoutineConfig) -> None:
        """Use ``config`` for the next fresh start; an active run is unaffected."""
        with self._lock:
            self._config = config

    # ----- User intent -----
    def toggle(self, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        """Start, pause, resume or restart depending on the current state."""
        with self._lock:
            state = self.scheduler.state
            if state == SchedulerState.RUNNING:
                self._pause(now_ms)
            elif state == SchedulerState.PAUSED:
                self._resume(now_ms)
            else:
                # A finished run cannot be resumed, only rebuilt and restarted
                self._start_fresh(now_ms)

            snapshot = self.snapshot()
            self._publish(snapshot)
            return snapshot

    def pause(self, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        with self._lock:
            self._pause(now_ms)
            snapshot = self.snapshot()
            self._publish(snapshot)
            return snapshot

    def resume(self, now_ms: Optional[int] = None) -> SchedulerSnapshot:
        with self._lock:
            self._resume(now_ms)
            snapshot = self.snapshot()
            self._publish(snapshot)
            return snapshot

    def reset_all(self) -> SchedulerSnapshot:
        """Return to IDLE and clear every derived display field."""
        with self._lock:
            self._stop_loop()
            self.scheduler.reset()
            self._run_config = None
            self._notify("hide")
            self.start_label = UNSET_LABEL
            self.eta_label = UNSET_LABEL

            snapshot = self.snapshot()
            self._publish(snapshot)
            return snapshot

    def close(self) -> None:
        """Tear down polling; no callback runs after this returns."""
        with self._lock:
            loop = self._loop
            self._loop = None
        if loop is not None:
            loop.stop(wait=True)

    # ----- Polling -----
    def poll(self, now_ms: Optional[int] = None) -> Optional[SchedulerEvent]:
        """Poll the scheduler once and apply the resulting event."""
        with self._lock:
            event = self.scheduler.poll(now_ms)
            if event is None:
                return None

            if isinstance(event, StageChangedEvent):
                self._on_stage_changed(event)
            elif isinstance(event, FinishedEvent):
                self._on_finished()

            self._publish(event.snapshot)
            return event

    def _on_loop_tick(self, loop: Optional[PollingLoop]) -> None:
        with self._lock:
            if loop is None or loop is not self._loop:
                return
            self.poll()

    # ----- Event handling -----
    def _on_stage_changed(self, event: StageChangedEvent) -> None:
        task = event.task
        if isinstance(task, AlarmTask):
            volume = (self._run_config or self._config).volume_percent
            self._call_collaborator(
                "play_alert", self.audio.play_alert,
                task.sound_id, task.duration_seconds, volume
            )
            self._notify("show", task.label)
        else:
            self._notify("hide")

    def _on_finished(self) -> None:
        self._stop_loop()
        self.logger.info("Sequence finished", task_count=self.snapshot().sequence_length)
        self._notify("show", COMPLETION_TITLE)

    # ----- Transitions -----
    def _start_fresh(self, now_ms: Optional[int]) -> None:
        config = self._config
        sequence = build_sequence(config)

        try:
            self.scheduler.start(sequence, now_ms)
        except EmptySequenceError:
            self.logger.warning("Start ignored: routine produces no tasks")
            return
        except InvalidStateTransitionError as e:
            self.logger.warning("Start ignored", current_state=e.current_state)
            return

        self._run_config = config
        self._notify("hide")

        started_at = self._wall_clock()
        self.start_label = format_clock_label(started_at)
        self.eta_label = eta_label(started_at, sequence.total_seconds)

        if self._settings_sink is not None:
            self._call_collaborator("save_settings", self._settings_sink, config)

        self._start_loop()

    def _pause(self, now_ms: Optional[int]) -> None:
        try:
            self.scheduler.pause(now_ms)
        except InvalidStateTransitionError as e:
            self.logger.warning("Pause ignored", current_state=e.current_state)
            return
        self._stop_loop()

    def _resume(self, now_ms: Optional[int]) -> None:
        try:
            self.scheduler.resume(now_ms)
        except InvalidStateTransitionError as e:
            self.logger.warning("Resume ignored", current_state=e.current_state)
            return
        self._start_loop()

    # ----- Loop management -----
    def _start_loop(self) -> None:
        self._stop_loop()
        if self._loop_factory is None:
            return

        loop: Optional[PollingLoop] = None
        loop = self._loop_factory(lambda: self._on_loop_tick(loop), self.poll_interval_ms)
        self._loop = loop
        loop.start()

    def _stop_loop(self) -> None:
        loop = self._loop
        self._loop = None
        if loop is not None:
            # A tick callback may be waiting on self._lock; never join under it
            loop.stop(wait=False)

    # ----- Collaborators -----
    def _notify(self, action: str, *args: Any) -> None:
        self._call_collaborator(f"notification_{action}", getattr(self.notifications, action), *args)

    def _call_collaborator(self, name: str, fn: Callable[..., Any], *args: Any) -> None:
        # Collaborator requests are fire and forget
        try:
            fn(*args)
        except Exception as e:
            self.logger.error("Collaborator request failed", request=name, error=str(e))

    def _publish(self, snapshot: SchedulerSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error("Snapshot listener failed", error=str(e))
