"""
Sequencing error classifications for the scheduler state machine.

Both conditions are recoverable: the scheduler raises them before touching
its run state, so ignoring them leaves everything exactly as it was.
"""

from typing import Optional, Dict, Any


class SequencerError(Exception):
    """Base class for recoverable sequencing conditions."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class EmptySequenceError(SequencerError):
    """Start requested for a sequence with zero tasks."""


class InvalidStateTransitionError(SequencerError):
    """Operation not allowed from the scheduler's current state."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
