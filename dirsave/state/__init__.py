"""Run state tracking."""

from .models import BackupStatus, GlobalState, RunProgress
from .progress_bar import TqdmProgressSink
from .writer import JsonStateWriter, ProgressSink, load_state

__all__ = [
    "BackupStatus",
    "GlobalState",
    "JsonStateWriter",
    "ProgressSink",
    "RunProgress",
    "TqdmProgressSink",
    "load_state",
]
