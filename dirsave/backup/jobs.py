"""Backup job storage."""

import json
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from ..util.logging import get_logger
from ..util.paths import write_text_atomic
from .models import BackupJob

logger = get_logger(__name__)

DEFAULT_MAX_JOBS = 5


class JobError(Exception):
    """Job management error."""
    pass


class JobNotFoundError(JobError, KeyError):
    """No job exists with the requested id."""

    def __init__(self, job_id: int) -> None:
        super().__init__(f"Job with ID {job_id} not found")
        self.job_id = job_id

    def __str__(self) -> str:
        return self.args[0]


class JobLimitError(JobError):
    """The repository already holds the maximum number of jobs."""
    pass


class DuplicateJobError(JobError):
    """A job with the same id already exists."""
    pass


class SequentialJobIdProvider:
    """Hands out ids one above the highest id in use."""

    def next_id(self, existing: List[BackupJob]) -> int:
        ids = [job.id for job in existing if job.id is not None]
        if not ids:
            return 1
        return max(ids) + 1


class JobRepository:
    """Base class for job storage backends.

    Subclasses implement ``_load`` and ``_save``; the rules about ids
    and limits live here.
    """

    def __init__(self, id_provider: SequentialJobIdProvider = None, max_jobs: int = DEFAULT_MAX_JOBS) -> None:
        self.id_provider = id_provider or SequentialJobIdProvider()
        self.max_jobs = max_jobs

    def add(self, job: BackupJob) -> BackupJob:
        """Store a new job, assigning an id if it has none.

        Returns:
            The stored job, with its id

        Raises:
            JobLimitError: If max_jobs jobs already exist
            DuplicateJobError: If the job's id is already taken
        """
        jobs = self._load()

        if len(jobs) >= self.max_jobs:
            raise JobLimitError(f"Cannot add more than {self.max_jobs} jobs")

        if job.id is None:
            job = job.model_copy(update={"id": self.id_provider.next_id(list(jobs.values()))})

        if job.id in jobs:
            raise DuplicateJobError(f"Job with ID {job.id} already exists")

        jobs[job.id] = job
        self._save(jobs)
        logger.debug(f"Added job {job.describe()}")
        return job

    def remove(self, job_id: int) -> None:
        jobs = self._load()
        if job_id not in jobs:
            raise JobNotFoundError(job_id)

        del jobs[job_id]
        self._save(jobs)
        logger.debug(f"Removed job {job_id}")

    def get(self, job_id: int) -> BackupJob:
        jobs = self._load()
        if job_id not in jobs:
            raise JobNotFoundError(job_id)
        return jobs[job_id]

    def list(self) -> List[BackupJob]:
        """All jobs, ordered by id."""
        return [job for _, job in sorted(self._load().items())]

    def count(self) -> int:
        return len(self._load())

    def update(self, job: BackupJob) -> BackupJob:
        jobs = self._load()
        if job.id not in jobs:
            raise JobNotFoundError(job.id)

        jobs[job.id] = job
        self._save(jobs)
        return job

    def _load(self) -> Dict[int, BackupJob]:
        raise NotImplementedError

    def _save(self, jobs: Dict[int, BackupJob]) -> None:
        raise NotImplementedError


class InMemoryJobRepository(JobRepository):
    """Jobs kept for the lifetime of the process only."""

    def __init__(self, id_provider: SequentialJobIdProvider = None, max_jobs: int = DEFAULT_MAX_JOBS) -> None:
        super().__init__(id_provider, max_jobs)
        self._jobs: Dict[int, BackupJob] = {}

    def _load(self) -> Dict[int, BackupJob]:
        return dict(self._jobs)

    def _save(self, jobs: Dict[int, BackupJob]) -> None:
        self._jobs = dict(jobs)


class JsonJobRepository(JobRepository):
    """Jobs persisted as a JSON list in ``path``."""

    def __init__(
        self,
        path: Path,
        id_provider: SequentialJobIdProvider = None,
        max_jobs: int = DEFAULT_MAX_JOBS,
    ) -> None:
        super().__init__(id_provider, max_jobs)
        self.path = Path(path)

    def _load(self) -> Dict[int, BackupJob]:
        if not self.path.exists():
            return {}

        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}

        try:
            data = json.loads(text)
            jobs = [BackupJob(**item) for item in data]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable jobs file {self.path}: {e}")
            return {}

        return {job.id: job for job in jobs if job.id is not None}

    def _save(self, jobs: Dict[int, BackupJob]) -> None:
        data = [job.model_dump(mode="json") for _, job in sorted(jobs.items())]
        write_text_atomic(self.path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        logger.debug(f"Saved {len(data)} jobs to {self.path}")
