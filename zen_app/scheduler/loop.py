"""
Background polling loop that drives the scheduler while a run is active.

A loop instance is single-use: the controller starts a fresh one on every
start/resume and stops it on pause, finish, reset and teardown, so two loops
never poll the same run.
"""

import threading
from typing import Callable, Optional

from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_MS = 250


class PollingLoop:
    """
    Calls ``callback`` every ``interval_ms`` on a daemon thread until stopped.

    A callback that raises is logged and called again on the next interval;
    only ``stop`` ends the loop.
    """

    def __init__(self, callback: Callable[[], None],
                 interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
                 name: str = "zen-poll"):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.callback = callback
        self.interval_ms = interval_ms
        self.name = name
        self.logger = logger
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("PollingLoop instances cannot be restarted")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self.logger.debug("Polling loop started", loop=self.name, interval_ms=self.interval_ms)

    def stop(self, wait: bool = True, timeout: Optional[float] = 1.0) -> None:
        """
        Stop the loop.

        Args:
            wait: Join the worker thread so no callback is in flight on return
            timeout: Maximum seconds to wait for the join
        """
        self._stop.set()
        thread = self._thread
        # A callback may stop its own loop (e.g. on finish); it cannot join itself
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self.logger.debug("Polling loop stopped", loop=self.name)

    def _run(self) -> None:
        interval = self.interval_ms / 1000
        while not self._stop.wait(interval):
            try:
                self.callback()
            except Exception as e:
                self.logger.error("Polling callback failed", loop=self.name, error=str(e))
