"""
Utility functions module.

Time Semantics:
- Deadlines are absolute millisecond timestamps on a monotonic clock
- Remaining time is always deadline minus now, rounded up to whole seconds
- Wall-clock time is only used for human-facing labels (start time, ETA)
"""
