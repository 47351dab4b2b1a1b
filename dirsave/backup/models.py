"""Backup job model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BackupPolicy(str, Enum):
    """How a job decides which files to copy."""

    COMPLETE = "complete"
    DIFFERENTIAL = "differential"


class BackupJob(BaseModel):
    """A named source -> destination backup definition."""

    id: Optional[int] = Field(default=None, description="Assigned by the job repository")
    name: str = Field(description="Job name")
    source: str = Field(description="Source directory")
    destination: str = Field(description="Destination directory")
    policy: BackupPolicy = Field(default=BackupPolicy.COMPLETE, description="Copy policy")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @field_validator("name", "source", "destination")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def describe(self) -> str:
        return f"[{self.id}] {self.name} | {self.source} -> {self.destination} ({self.policy.value})"
