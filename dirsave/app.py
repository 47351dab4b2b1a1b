"""Application service tying job storage to the backup engine."""

from typing import Iterable, List, Optional

from .backup.engine import BackupEngine
from .backup.jobs import JobRepository, JsonJobRepository
from .backup.models import BackupJob, BackupPolicy
from .config import DirSaveConfig
from .eventlog.writer import build_event_logger
from .fs.filesystem import LocalFileSystem
from .fs.transfer import LocalTransferService
from .state.models import GlobalState
from .state.writer import JsonStateWriter, ProgressSink, load_state
from .util.logging import get_logger

logger = get_logger(__name__)


class BackupApplicationService:
    """Job management and sequential job execution."""

    def __init__(self, repository: JobRepository, engine: BackupEngine, progress_sink: ProgressSink) -> None:
        self.repository = repository
        self.engine = engine
        self.progress_sink = progress_sink

    def create_job(self, name: str, source: str, destination: str, policy: BackupPolicy) -> BackupJob:
        """Create and store a new backup job."""
        job = BackupJob(name=name, source=source, destination=destination, policy=policy)
        return self.repository.add(job)

    def remove_job(self, job_id: int) -> None:
        """Delete a job and flag its last known state as inactive."""
        self.repository.remove(job_id)
        self.progress_sink.mark_inactive(job_id)

    def update_job(self, job: BackupJob) -> BackupJob:
        return self.repository.update(job)

    def get_job(self, job_id: int) -> BackupJob:
        return self.repository.get(job_id)

    def list_jobs(self) -> List[BackupJob]:
        return self.repository.list()

    def run_job(self, job: BackupJob) -> None:
        self.engine.execute(job)

    def run_job_by_id(self, job_id: int) -> None:
        self.run_job(self.repository.get(job_id))

    def run_jobs_by_ids(self, job_ids: Iterable[int]) -> List[BackupJob]:
        """Run the given jobs one after another.

        Every id is looked up before the first job starts, so an unknown
        id runs nothing.

        Raises:
            JobNotFoundError: If any id is unknown
            EngineError: If a run fails; later jobs are not started
        """
        jobs = [self.repository.get(job_id) for job_id in job_ids]
        self._run_sequentially(jobs)
        return jobs

    def run_all_jobs(self) -> List[BackupJob]:
        jobs = self.repository.list()
        self._run_sequentially(jobs)
        return jobs

    def _run_sequentially(self, jobs: List[BackupJob]) -> None:
        for index, job in enumerate(jobs, start=1):
            logger.info(f"Running job {index}/{len(jobs)}: {job.name}")
            self.run_job(job)


def build_service(
    config: DirSaveConfig,
    progress_sink: Optional[ProgressSink] = None,
    state: Optional[GlobalState] = None,
) -> BackupApplicationService:
    """Compose the default service stack from configuration.

    Args:
        config: Loaded configuration
        progress_sink: Sink to use instead of the JSON state writer
        state: Shared state object (loaded from the state file if None)
    """
    filesystem = LocalFileSystem()

    if progress_sink is None:
        if state is None:
            state = load_state(config.state_path)
        progress_sink = JsonStateWriter(config.state_path, state)

    engine = BackupEngine(
        filesystem=filesystem,
        transfer_service=LocalTransferService(filesystem),
        progress_sink=progress_sink,
        event_logger=build_event_logger(config),
    )
    repository = JsonJobRepository(config.jobs_path, max_jobs=config.max_jobs)

    return BackupApplicationService(repository, engine, progress_sink)
