"""Console progress bar driven by run snapshots."""

from typing import Dict, Optional

from tqdm import tqdm

from .models import BackupStatus, RunProgress
from .writer import ProgressSink


class TqdmProgressSink(ProgressSink):
    """Forwards snapshots to another sink and renders them as a tqdm bar.

    One bar is opened per job run, sized in files. Skipped files produce
    no snapshot, so the bar jumps to the total when the run ends.
    """

    def __init__(self, inner: ProgressSink, disable: Optional[bool] = None, leave: bool = True) -> None:
        self.inner = inner
        self.disable = disable
        self.leave = leave
        self._bars: Dict[int, tqdm] = {}

    def update(self, progress: RunProgress) -> None:
        self.inner.update(progress)

        bar = self._bars.get(progress.job_id)
        if bar is None:
            if progress.status != BackupStatus.ACTIVE:
                return
            bar = tqdm(
                total=progress.total_files,
                desc=progress.job_name,
                unit="file",
                disable=self.disable,
                leave=self.leave,
            )
            self._bars[progress.job_id] = bar

        if progress.status == BackupStatus.ACTIVE:
            processed = progress.total_files - progress.remaining_files
            bar.update(processed - bar.n)
            if progress.current_source_path:
                bar.set_postfix_str(progress.current_source_path[-40:])
            return

        # Done or error: close out the bar for this run
        if progress.status == BackupStatus.DONE:
            bar.update(bar.total - bar.n)
        bar.close()
        del self._bars[progress.job_id]

    def mark_inactive(self, job_id: int) -> None:
        self.inner.mark_inactive(job_id)
