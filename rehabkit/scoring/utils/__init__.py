"""
Utils Package for RehabKit scoring.

- logger: session event log
- numeric: rounding and statistics helpers
"""

from .logger import (
    SessionLogger,
    LogLevel,
    LogCategory,
    LogEntry,
    create_session_logger,
)
from .numeric import round_half_up, clamp, population_variance

__all__ = [
    "SessionLogger",
    "LogLevel",
    "LogCategory",
    "LogEntry",
    "create_session_logger",
    "round_half_up",
    "clamp",
    "population_variance",
]
