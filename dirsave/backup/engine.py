"""Backup execution engine."""

import os
import time
import typing as t

from ..eventlog.models import LogEventType, LogRecord
from ..eventlog.writer import EventLogger, NoOpLogger
from ..fs.filesystem import FileSystem
from ..fs.transfer import TransferErrorCode, TransferOutcome, TransferService
from ..state.models import BackupStatus, RunProgress
from ..state.writer import ProgressSink
from ..util.logging import get_logger
from ..util.paths import format_size
from ..util.timeutil import format_duration
from .models import BackupJob, BackupPolicy

logger = get_logger(__name__)


class EngineError(Exception):
    """A backup run could not be completed."""
    pass


class UnsupportedPolicyError(EngineError):
    """The job's backup policy is not one the engine knows."""
    pass


class EnumerationError(EngineError):
    """The source tree could not be listed."""
    pass


class _Run:
    """Counters for one job run."""

    def __init__(self, job: BackupJob) -> None:
        self.job = job
        self.total_files = 0
        self.total_size = 0
        self.remaining_files = 0
        self.remaining_size = 0
        self.failed_files = 0
        self.progress = 0

    def start(self, total_files: int, total_size: int) -> None:
        self.total_files = self.remaining_files = total_files
        self.total_size = self.remaining_size = total_size

    def file_processed(self, size_bytes: int, failed: bool) -> None:
        self.remaining_files -= 1
        self.remaining_size = max(0, self.remaining_size - size_bytes)
        if failed:
            self.failed_files += 1

        processed = self.total_files - self.remaining_files
        self.progress = 100 * processed // self.total_files

    def finish(self) -> None:
        self.remaining_files = 0
        self.remaining_size = 0
        self.progress = 100

    def snapshot(self, status: BackupStatus, source: str = "", destination: str = "") -> RunProgress:
        return RunProgress(
            job_id=self.job.id if self.job.id is not None else 0,
            job_name=self.job.name,
            status=status,
            total_files=self.total_files,
            total_size_bytes=self.total_size,
            remaining_files=self.remaining_files,
            remaining_size_bytes=self.remaining_size,
            progress_percent=self.progress,
            failed_files=self.failed_files,
            current_source_path=source,
            current_destination_path=destination,
        )


class BackupEngine:
    """Runs one backup job at a time, synchronously, to completion."""

    def __init__(
        self,
        filesystem: FileSystem,
        transfer_service: TransferService,
        progress_sink: ProgressSink,
        event_logger: t.Optional[EventLogger] = None,
    ) -> None:
        """Initialize backup engine.

        Args:
            filesystem: Filesystem used to walk the source and check the destination
            transfer_service: Performs the individual file copies
            progress_sink: Receives a RunProgress snapshot at start, per copied file and at the end
            event_logger: Receives the auditable event records (discarded if None)
        """
        self.filesystem = filesystem
        self.transfer_service = transfer_service
        self.progress_sink = progress_sink
        self.event_logger = event_logger or NoOpLogger()

    def execute(self, job: BackupJob) -> None:
        """Execute a backup job.

        Files the policy selects are copied; skipped files emit no
        snapshot. A failed transfer is counted as processed and flagged,
        and the run moves on to the next file.

        Raises:
            UnsupportedPolicyError: If the job's policy is unknown
            EnumerationError: If the source tree cannot be listed
            EngineError: For any other failure that stops the run
        """
        run = _Run(job)
        started = time.perf_counter()
        logger.info(f"Starting backup '{job.name}': {job.source} -> {job.destination}")

        try:
            policy = self._resolve_policy(job.policy)
            files, sizes = self._scan(job.source)
            run.start(len(files), sum(sizes))

            self.progress_sink.update(run.snapshot(BackupStatus.ACTIVE))
            self._log(job, LogEventType.RUN_STARTED, job.source, job.destination, run.total_size)
            logger.info(f"Found {run.total_files} files ({format_size(run.total_size)})")

            for source_file, source_size in zip(files, sizes):
                relative = self.filesystem.relative_path(job.source, source_file)
                destination_file = self.filesystem.join(job.destination, relative)

                if not self.should_copy(policy, source_size, destination_file):
                    logger.debug(f"Unchanged, skipping: {relative}")
                    continue

                outcome = self._copy(job, source_file, destination_file)
                if outcome.is_success:
                    run.file_processed(outcome.file_size_bytes, failed=False)
                else:
                    run.file_processed(source_size, failed=True)

                self.progress_sink.update(
                    run.snapshot(BackupStatus.ACTIVE, source_file, destination_file)
                )

            run.finish()
            elapsed = time.perf_counter() - started
            self._log(job, LogEventType.RUN_ENDED, job.source, job.destination,
                      run.total_size, int(elapsed * 1000))
            self.progress_sink.update(run.snapshot(BackupStatus.DONE))

        except EngineError as e:
            self._fail(run, e)
            raise
        except Exception as e:
            self._fail(run, e)
            raise EngineError(f"Backup '{job.name}' failed: {e}") from e

        logger.info(
            f"Backup '{job.name}' finished in {format_duration(elapsed)}"
            f" ({run.failed_files} failed)"
        )

    def should_copy(self, policy: BackupPolicy, source_size: int, destination_file: str) -> bool:
        """Decide whether a source file of ``source_size`` bytes must be copied.

        Differential only skips a file when a file of the same size
        already exists at the destination.
        """
        if policy == BackupPolicy.COMPLETE:
            return True

        if policy == BackupPolicy.DIFFERENTIAL:
            if not self.filesystem.directory_exists(self.filesystem.parent(destination_file)):
                return True
            if not self.filesystem.file_exists(destination_file):
                return True
            return self.filesystem.get_file_size(destination_file) != source_size

        raise UnsupportedPolicyError(f"Backup policy {policy!r} is not supported")

    def enumerate_source(self, root: str) -> t.List[str]:
        """List every file under ``root``.

        A directory's own files come before its subdirectories, and
        both are visited in the order the filesystem returns them.
        """
        files: t.List[str] = []
        pending = [root]

        while pending:
            directory = pending.pop()
            files.extend(self.filesystem.enumerate_files(directory))
            pending.extend(reversed(self.filesystem.enumerate_directories(directory)))

        return files

    def _scan(self, root: str) -> t.Tuple[t.List[str], t.List[int]]:
        try:
            files = self.enumerate_source(root)
            sizes = [self.filesystem.get_file_size(path) for path in files]
        except OSError as e:
            raise EnumerationError(f"Cannot enumerate source {root}: {e}") from e
        return files, sizes

    def _copy(self, job: BackupJob, source_file: str, destination_file: str) -> TransferOutcome:
        destination_dir = self.filesystem.parent(destination_file)

        try:
            if not self.filesystem.directory_exists(destination_dir):
                self.filesystem.create_directory(destination_dir)
                self._log(job, LogEventType.CREATE_DIRECTORY, destination_dir, destination_dir)
        except OSError as e:
            outcome = TransferOutcome.failure(0, 1, e.errno or TransferErrorCode.UNKNOWN_IO_ERROR)
        else:
            outcome = self.transfer_service.transfer_file(source_file, destination_file, True)

        self._log(job, LogEventType.TRANSFER_FILE, source_file, destination_file,
                  outcome.file_size_bytes, outcome.transfer_time_ms)

        if not outcome.is_success:
            reason = os.strerror(outcome.error_code) if outcome.error_code > 0 else "transfer error"
            logger.warning(
                f"Failed to copy {source_file} -> {destination_file}: "
                f"{reason} (code {outcome.error_code})"
            )
            self._log(job, LogEventType.ERROR, source_file, destination_file,
                      outcome.file_size_bytes, outcome.transfer_time_ms)

        return outcome

    def _fail(self, run: _Run, error: Exception) -> None:
        logger.error(f"Backup '{run.job.name}' aborted: {error}")
        try:
            self.progress_sink.update(run.snapshot(BackupStatus.ERROR))
            self._log(run.job, LogEventType.ERROR, run.job.source, run.job.destination)
        except Exception as report_error:
            # the caller sees the run error, not this one
            logger.error(f"Could not record failure of '{run.job.name}': {report_error}")

    def _log(
        self,
        job: BackupJob,
        event: LogEventType,
        source: str = "",
        destination: str = "",
        size_bytes: int = 0,
        time_ms: int = 0,
    ) -> None:
        self.event_logger.write(LogRecord(
            job_name=job.name,
            event=event,
            source_path=source,
            destination_path=destination,
            file_size_bytes=size_bytes,
            transfer_time_ms=time_ms,
        ))

    @staticmethod
    def _resolve_policy(policy: t.Any) -> BackupPolicy:
        try:
            return BackupPolicy(policy)
        except ValueError as e:
            raise UnsupportedPolicyError(f"Backup policy {policy!r} is not supported") from e
