"""
Error classification for the sequencer.

Sequencing errors are local and recoverable: callers log them and leave the
run untouched. System failures cover the storage and settings boundaries.
"""

from .sequencing import (
    SequencerError,
    EmptySequenceError,
    InvalidStateTransitionError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Sequencing Errors
    "SequencerError",
    "EmptySequenceError",
    "InvalidStateTransitionError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
]
