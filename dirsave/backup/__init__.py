"""Backup module initialization."""

from .engine import BackupEngine, EngineError, EnumerationError, UnsupportedPolicyError
from .jobs import (
    DuplicateJobError,
    InMemoryJobRepository,
    JobError,
    JobLimitError,
    JobNotFoundError,
    JobRepository,
    JsonJobRepository,
    SequentialJobIdProvider,
)
from .models import BackupJob, BackupPolicy

__all__ = [
    # engine
    "BackupEngine",
    "EngineError",
    "EnumerationError",
    "UnsupportedPolicyError",
    # jobs
    "DuplicateJobError",
    "InMemoryJobRepository",
    "JobError",
    "JobLimitError",
    "JobNotFoundError",
    "JobRepository",
    "JsonJobRepository",
    "SequentialJobIdProvider",
    # models
    "BackupJob",
    "BackupPolicy",
]
