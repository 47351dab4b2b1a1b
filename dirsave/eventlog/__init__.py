"""Daily structured event log."""

from .formatters import JsonLogFormatter, LogFormatter, XmlLogFormatter, get_formatter
from .models import LogEventType, LogFormat, LogRecord
from .writer import (
    DailyFileLogger,
    EventLogger,
    LogFileCorruptedError,
    NoOpLogger,
    build_event_logger,
)

__all__ = [
    # formatters
    "JsonLogFormatter",
    "LogFormatter",
    "XmlLogFormatter",
    "get_formatter",
    # models
    "LogEventType",
    "LogFormat",
    "LogRecord",
    # writers
    "DailyFileLogger",
    "EventLogger",
    "LogFileCorruptedError",
    "NoOpLogger",
    "build_event_logger",
]
