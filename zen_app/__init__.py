"""
Zen App - Staged Countdown Sequencer

Drives a repeating multi-stage timed routine (stage A → B → C over N rounds),
firing alarm sounds and stage-change notifications at task boundaries while
tracking remaining time against absolute deadlines.
"""

__version__ = "0.1.0"
__author__ = "Zen Team"
