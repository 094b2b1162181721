"""
Logging configuration and utilities for the sequencer.
"""
from .config import configure_logging, get_logger, get_scheduler_logger, log_stage_transition

__all__ = ["configure_logging", "get_logger", "get_scheduler_logger", "log_stage_transition"]
