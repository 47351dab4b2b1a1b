"""Run progress snapshots and the shared state they are collected into."""

from datetime import datetime
from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field

from ..util.timeutil import utc_now


class BackupStatus(str, Enum):
    """Lifecycle status of a job's last run."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    DONE = "done"
    ERROR = "error"


class RunProgress(BaseModel):
    """Point-in-time description of one job's run."""

    job_id: int = Field(description="Backup job identifier")
    job_name: str = Field(description="Backup job name")
    timestamp: datetime = Field(default_factory=utc_now, description="Snapshot time (UTC)")
    status: BackupStatus = Field(description="Run status")

    total_files: int = Field(default=0, description="Files discovered in the source tree")
    total_size_bytes: int = Field(default=0, description="Sum of discovered file sizes")
    remaining_files: int = Field(default=0, description="Files not yet processed")
    remaining_size_bytes: int = Field(default=0, description="Bytes not yet processed")
    progress_percent: int = Field(default=0, ge=0, le=100, description="Percent complete")
    failed_files: int = Field(default=0, description="Failed transfers so far in this run")

    current_source_path: str = Field(default="", description="Last processed source file")
    current_destination_path: str = Field(default="", description="Last processed destination file")


class GlobalState(BaseModel):
    """Last known snapshot of every job, keyed by job id."""

    updated_at: datetime = Field(default_factory=utc_now)
    entries: Dict[int, RunProgress] = Field(default_factory=dict)
