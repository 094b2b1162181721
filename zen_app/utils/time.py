"""
Clock helpers for deadline arithmetic and human-facing time labels.

The scheduler never decrements counters: it stores absolute deadlines read
from ``monotonic_ms`` and derives remaining time from them on every poll.
"""

import math
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

Clock = Callable[[], int]

UNSET_LABEL = "--:--"


def monotonic_ms() -> int:
    """Current monotonic time in integer milliseconds."""
    return time.monotonic_ns() // 1_000_000


def remaining_seconds(deadline_ms: Optional[int], now_ms: int) -> int:
    """
    Whole seconds left until a deadline, rounded up and never negative.

    Args:
        deadline_ms: Absolute deadline; None means no deadline is armed
        now_ms: Current timestamp on the same clock

    Returns:
        ceil((deadline - now) / 1000) clamped at zero
    """
    if deadline_ms is None:
        return 0
    return max(0, math.ceil((deadline_ms - now_ms) / 1000))


def remaining_ms(deadline_ms: Optional[int], now_ms: int) -> int:
    """Milliseconds left until a deadline, clamped at zero."""
    if deadline_ms is None:
        return 0
    return max(0, deadline_ms - now_ms)


def format_clock_label(moment: datetime) -> str:
    """Format a wall-clock moment as HH:MM."""
    return moment.strftime("%H:%M")


def eta_label(start: datetime, total_seconds: int) -> str:
    """HH:MM label for the moment a run started at ``start`` will end."""
    return format_clock_label(start + timedelta(seconds=total_seconds))
