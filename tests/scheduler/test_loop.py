"""Tests for the background polling loop."""

import threading
import time

import pytest

from zen_app.scheduler.loop import PollingLoop


class TestPollingLoop:
    """Test polling loop lifecycle."""

    def test_invalid_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            PollingLoop(lambda: None, interval_ms=0)

    def test_calls_callback_until_stopped(self) -> None:
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) >= 3:
                fired.set()

        loop = PollingLoop(callback, interval_ms=5)
        loop.start()
        assert fired.wait(2.0)
        assert loop.is_running

        loop.stop()
        count = len(calls)
        time.sleep(0.05)

        assert not loop.is_running
        assert len(calls) == count

    def test_cannot_restart(self) -> None:
        loop = PollingLoop(lambda: None, interval_ms=5)
        loop.start()
        loop.stop()

        with pytest.raises(RuntimeError):
            loop.start()

    def test_stop_before_start_is_harmless(self) -> None:
        loop = PollingLoop(lambda: None, interval_ms=5)
        loop.stop()
        assert not loop.is_running

    def test_callback_may_stop_its_own_loop(self) -> None:
        stopped = threading.Event()
        holder = {}

        def callback():
            holder["loop"].stop()
            stopped.set()

        loop = PollingLoop(callback, interval_ms=5)
        holder["loop"] = loop
        loop.start()

        assert stopped.wait(2.0)
        loop._thread.join(1.0)
        assert not loop._thread.is_alive()

    def test_failing_callback_keeps_loop_alive(self) -> None:
        """A tick that raises is logged and the next tick still runs."""
        recovered = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("transient failure")
            recovered.set()

        loop = PollingLoop(callback, interval_ms=5)
        loop.start()
        try:
            assert recovered.wait(2.0)
            assert loop.is_running
        finally:
            loop.stop()
