"""
Audio alert service.

The controller only ever calls ``play_alert(sound_id, duration_seconds,
volume_percent)``. ``ToneAlertService`` turns that request into one beat per
second in the timbre keyed by ``sound_id`` and hands the beats to a tone sink
that is acquired lazily on first use and released on shutdown.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from ..logging.config import get_logger
from ..routine.models import SoundId

logger = get_logger(__name__)

FINAL_GAIN = 0.01
BEAT_STOP_SECONDS = 0.9
VIBRATION_PULSE_MS = 300


@dataclass(frozen=True)
class ToneProfile:
    """Oscillator settings for one alarm timbre."""
    waveform: str          # sine | triangle | square
    frequency_hz: float
    decay_seconds: float   # Time for gain to ramp down to FINAL_GAIN


TONE_PROFILES: dict[SoundId, ToneProfile] = {
    SoundId.BELL: ToneProfile(waveform="sine", frequency_hz=880.0, decay_seconds=0.8),
    SoundId.WOOD: ToneProfile(waveform="triangle", frequency_hz=300.0, decay_seconds=0.4),
    SoundId.ALERT: ToneProfile(waveform="square", frequency_hz=440.0, decay_seconds=0.5),
}


@dataclass(frozen=True)
class Beat:
    """One scheduled alert beat, offsets relative to the request."""
    start_offset: float
    stop_offset: float
    gain: float
    profile: ToneProfile


def plan_beats(sound_id: SoundId, duration_seconds: int, volume_percent: int) -> list[Beat]:
    """One beat per second of alarm, all at the requested volume."""
    try:
        profile = TONE_PROFILES[SoundId(sound_id)]
    except ValueError:
        # Unknown timbres fall back to the plain alert tone
        profile = TONE_PROFILES[SoundId.ALERT]
    gain = max(0, min(100, volume_percent)) / 100
    return [
        Beat(start_offset=float(i), stop_offset=i + BEAT_STOP_SECONDS, gain=gain, profile=profile)
        for i in range(max(0, duration_seconds))
    ]


def vibration_pattern(duration_seconds: int) -> list[int]:
    """Vibration pulses (ms) accompanying an alarm; always at least one."""
    return [VIBRATION_PULSE_MS] * max(1, duration_seconds)


class ToneSink(ABC):
    """Output device that renders scheduled beats."""

    @abstractmethod
    def schedule(self, beats: list[Beat], vibration: list[int]) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class LoggingToneSink(ToneSink):
    """Sink that records beats in the log instead of producing sound."""

    def __init__(self) -> None:
        self.logger = logger
        self.scheduled: list[Beat] = []
        self.closed = False

    def schedule(self, beats: list[Beat], vibration: list[int]) -> None:
        self.scheduled.extend(beats)
        self.logger.info(
            "Alert beats scheduled",
            beat_count=len(beats),
            waveform=beats[0].profile.waveform if beats else None,
            frequency_hz=beats[0].profile.frequency_hz if beats else None,
            vibration_pulses=len(vibration)
        )

    def close(self) -> None:
        self.closed = True


class AudioAlertService(ABC):
    """Interface the controller uses to request alarm sounds."""

    @abstractmethod
    def play_alert(self, sound_id: SoundId, duration_seconds: int, volume_percent: int) -> None:
        """Schedule ``duration_seconds`` one-second beats; returns immediately."""
        pass

    def close(self) -> None:
        """Release any device held by the service."""


class ToneAlertService(AudioAlertService):
    """Beat-planning audio service over a lazily acquired tone sink."""

    def __init__(self, sink_factory: Callable[[], ToneSink] = LoggingToneSink):
        self.logger = logger
        self._sink_factory = sink_factory
        self._sink: Optional[ToneSink] = None
        self._lock = threading.Lock()

    @property
    def sink(self) -> Optional[ToneSink]:
        return self._sink

    def _acquire_sink(self) -> ToneSink:
        with self._lock:
            if self._sink is None:
                self._sink = self._sink_factory()
                self.logger.debug("Tone sink acquired", sink=type(self._sink).__name__)
            return self._sink

    def play_alert(self, sound_id: SoundId, duration_seconds: int, volume_percent: int) -> None:
        beats = plan_beats(sound_id, duration_seconds, volume_percent)
        self._acquire_sink().schedule(beats, vibration_pattern(duration_seconds))

    def close(self) -> None:
        with self._lock:
            if self._sink is not None:
                self._sink.close()
                self._sink = None
                self.logger.debug("Tone sink released")


_audio_service: Optional[AudioAlertService] = None
_audio_lock = threading.Lock()


def get_audio_service() -> AudioAlertService:
    """Process-wide audio service, created on first use."""
    global _audio_service
    with _audio_lock:
        if _audio_service is None:
            _audio_service = ToneAlertService()
        return _audio_service


def shutdown_audio_service() -> None:
    """Release the process-wide audio service; called on application shutdown."""
    global _audio_service
    with _audio_lock:
        if _audio_service is not None:
            _audio_service.close()
            _audio_service = None
