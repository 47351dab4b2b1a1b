"""Tests for backup job models and storage."""

import json

import pytest

from dirsave.backup.jobs import (
    DuplicateJobError,
    InMemoryJobRepository,
    JobLimitError,
    JobNotFoundError,
    JsonJobRepository,
    SequentialJobIdProvider,
)
from dirsave.backup.models import BackupJob, BackupPolicy


def make_job(name="Docs", job_id=None, policy=BackupPolicy.COMPLETE):
    return BackupJob(id=job_id, name=name, source="/home/me/docs", destination="/mnt/backup/docs", policy=policy)


class TestBackupJob:
    """Test the backup job model."""

    def test_fields_are_trimmed(self):
        """Test that surrounding whitespace is removed."""
        job = BackupJob(name=" Docs ", source=" /src ", destination="/dst ")

        assert job.name == "Docs"
        assert job.source == "/src"
        assert job.destination == "/dst"
        assert job.policy == BackupPolicy.COMPLETE

    @pytest.mark.parametrize("field", ["name", "source", "destination"])
    def test_blank_fields_rejected(self, field):
        """Test that blank required fields are rejected."""
        fields = {"name": "Docs", "source": "/src", "destination": "/dst"}
        fields[field] = "   "

        with pytest.raises(ValueError):
            BackupJob(**fields)

    def test_policy_from_string(self):
        """Test that policies parse from their names."""
        job = BackupJob(name="a", source="/s", destination="/d", policy="differential")

        assert job.policy == BackupPolicy.DIFFERENTIAL

    def test_describe(self):
        """Test the one-line description."""
        assert make_job(job_id=2).describe() == "[2] Docs | /home/me/docs -> /mnt/backup/docs (complete)"


class TestSequentialJobIdProvider:
    """Test id allocation."""

    def test_first_id(self):
        """Test that the first id is 1."""
        assert SequentialJobIdProvider().next_id([]) == 1

    def test_next_after_highest(self):
        """Test that ids continue after the highest one, not into gaps."""
        existing = [make_job(job_id=1), make_job(job_id=4)]

        assert SequentialJobIdProvider().next_id(existing) == 5


class TestInMemoryJobRepository:
    """Test job repository rules."""

    def test_add_assigns_ids(self):
        """Test that added jobs get sequential ids."""
        repo = InMemoryJobRepository()

        first = repo.add(make_job("one"))
        second = repo.add(make_job("two"))

        assert (first.id, second.id) == (1, 2)
        assert repo.count() == 2

    def test_limit(self):
        """Test that the job limit is enforced."""
        repo = InMemoryJobRepository(max_jobs=2)
        repo.add(make_job("one"))
        repo.add(make_job("two"))

        with pytest.raises(JobLimitError):
            repo.add(make_job("three"))

    def test_default_limit_is_five(self):
        """Test the default job limit."""
        repo = InMemoryJobRepository()
        for index in range(5):
            repo.add(make_job(f"job{index}"))

        with pytest.raises(JobLimitError):
            repo.add(make_job("extra"))

    def test_duplicate_id(self):
        """Test that an explicit id cannot be reused."""
        repo = InMemoryJobRepository()
        repo.add(make_job(job_id=3))

        with pytest.raises(DuplicateJobError):
            repo.add(make_job("other", job_id=3))

    def test_list_sorted_by_id(self):
        """Test that jobs are listed by id."""
        repo = InMemoryJobRepository()
        repo.add(make_job("c", job_id=3))
        repo.add(make_job("a", job_id=1))

        assert [job.name for job in repo.list()] == ["a", "c"]

    def test_remove_and_get(self):
        """Test removing a job."""
        repo = InMemoryJobRepository()
        job = repo.add(make_job())

        repo.remove(job.id)

        with pytest.raises(JobNotFoundError) as exc_info:
            repo.get(job.id)
        assert exc_info.value.job_id == job.id
        assert str(exc_info.value) == f"Job with ID {job.id} not found"

    def test_remove_unknown(self):
        """Test that removing an unknown job raises, also as a KeyError."""
        with pytest.raises(KeyError):
            InMemoryJobRepository().remove(9)

    def test_update(self):
        """Test replacing a stored job."""
        repo = InMemoryJobRepository()
        job = repo.add(make_job())

        repo.update(job.model_copy(update={"policy": BackupPolicy.DIFFERENTIAL}))

        assert repo.get(job.id).policy == BackupPolicy.DIFFERENTIAL

    def test_update_unknown(self):
        """Test that updating an unknown job raises."""
        with pytest.raises(JobNotFoundError):
            InMemoryJobRepository().update(make_job(job_id=8))


class TestJsonJobRepository:
    """Test JSON job persistence."""

    def test_persists_across_instances(self, tmp_path):
        """Test that jobs survive a new repository instance."""
        path = tmp_path / "jobs.json"
        JsonJobRepository(path).add(make_job(policy=BackupPolicy.DIFFERENTIAL))

        jobs = JsonJobRepository(path).list()

        assert len(jobs) == 1
        assert jobs[0].id == 1
        assert jobs[0].policy == BackupPolicy.DIFFERENTIAL

    def test_file_format(self, tmp_path):
        """Test the on-disk representation."""
        path = tmp_path / "jobs.json"
        JsonJobRepository(path).add(make_job())

        data = json.loads(path.read_text())

        assert data == [{
            "id": 1,
            "name": "Docs",
            "source": "/home/me/docs",
            "destination": "/mnt/backup/docs",
            "policy": "complete",
        }]

    def test_missing_and_empty_files(self, tmp_path):
        """Test that missing or empty files hold no jobs."""
        path = tmp_path / "jobs.json"
        assert JsonJobRepository(path).count() == 0

        path.write_text("")
        assert JsonJobRepository(path).count() == 0

    def test_corrupt_file(self, tmp_path):
        """Test that an unreadable file holds no jobs."""
        path = tmp_path / "jobs.json"
        path.write_text("[{broken")

        assert JsonJobRepository(path).list() == []
