"""Event log record model."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..util.timeutil import utc_now


class LogEventType(str, Enum):
    """Kinds of events written to the daily event log."""

    CREATE_DIRECTORY = "create_directory"
    TRANSFER_FILE = "transfer_file"
    ERROR = "error"
    RUN_STARTED = "run_started"
    RUN_ENDED = "run_ended"


class LogFormat(str, Enum):
    """Container format of the daily event log file."""

    JSON = "json"
    XML = "xml"


class LogRecord(BaseModel):
    """One auditable event of a backup run.

    Field names and order are part of the on-disk format.
    """

    timestamp: datetime = Field(default_factory=utc_now, description="Event time (UTC)")
    job_name: str = Field(description="Backup job name")
    event: LogEventType = Field(description="Event kind")
    source_path: str = Field(default="", description="Source path")
    destination_path: str = Field(default="", description="Destination path")
    file_size_bytes: int = Field(default=0, description="File size in bytes")
    transfer_time_ms: int = Field(default=0, description="Transfer time, negative on failure")

    class Config:
        """Pydantic configuration."""
        frozen = True

    def with_changes(self, **changes: Any) -> "LogRecord":
        """Build a new record from every field of this one, overriding ``changes``."""
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"Unknown LogRecord fields: {', '.join(sorted(unknown))}")

        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields.update(changes)
        return type(self)(**fields)
