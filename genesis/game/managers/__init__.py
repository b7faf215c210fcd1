"""Manager systems for engine coordination.

This package contains manager classes that listen on the event bus.
"""

from .log_manager import LogManager, LogLevel, LogCategory, LogFilter, LogMessage

__all__ = [
    "LogManager",
    "LogLevel",
    "LogCategory",
    "LogFilter",
    "LogMessage",
]
