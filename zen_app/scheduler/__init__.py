"""
Drift-corrected scheduler module.

Advances a task sequence against absolute deadlines and reports ticks, stage
changes and completion. Handles transitions IDLE → RUNNING ⇄ PAUSED → FINISHED.
"""
