"""Tests for deadline arithmetic and time labels."""

from datetime import datetime

import pytest

from zen_app.utils.time import (
    eta_label, format_clock_label, monotonic_ms, remaining_ms, remaining_seconds
)


class TestRemainingSeconds:
    """Test ceil-and-clamp remaining time."""

    @pytest.mark.parametrize("deadline,now,expected", [
        (5000, 0, 5),
        (5000, 1, 5),
        (5000, 4001, 1),
        (5000, 5000, 0),
        (5000, 7000, 0),
        (None, 100, 0),
    ])
    def test_remaining_seconds(self, deadline, now, expected) -> None:
        assert remaining_seconds(deadline, now) == expected

    def test_remaining_ms(self) -> None:
        assert remaining_ms(5000, 1500) == 3500
        assert remaining_ms(5000, 9000) == 0
        assert remaining_ms(None, 0) == 0


class TestClockLabels:
    """Test wall-clock labels."""

    def test_format_clock_label(self) -> None:
        assert format_clock_label(datetime(2024, 1, 1, 8, 5)) == "08:05"

    def test_eta_wraps_midnight(self) -> None:
        assert eta_label(datetime(2024, 1, 1, 23, 59), 120) == "00:01"

    def test_monotonic_ms_does_not_go_backwards(self) -> None:
        first = monotonic_ms()
        assert isinstance(first, int)
        assert monotonic_ms() >= first
