"""Progress sinks that receive run snapshots from the backup engine."""

from pathlib import Path

from pydantic import ValidationError

from ..util.logging import get_logger
from ..util.paths import write_text_atomic
from ..util.timeutil import utc_now
from .models import BackupStatus, GlobalState, RunProgress

logger = get_logger(__name__)


class ProgressSink:
    """Receives RunProgress snapshots during a run."""

    def update(self, progress: RunProgress) -> None:
        """Record the latest snapshot for ``progress.job_id``."""
        raise NotImplementedError

    def mark_inactive(self, job_id: int) -> None:
        """Flag a job's last snapshot as inactive."""
        raise NotImplementedError


class JsonStateWriter(ProgressSink):
    """Keeps a GlobalState current and mirrors it to a JSON state file.

    The state object is owned by the caller; the writer only mutates it.
    """

    def __init__(self, state_path: Path, state: GlobalState) -> None:
        """Initialize state writer.

        Args:
            state_path: File the state is written to
            state: Shared state object updated in place
        """
        self.state_path = Path(state_path)
        self.state = state

    def update(self, progress: RunProgress) -> None:
        if progress is None:
            raise ValueError("progress is required")

        self.state.entries[progress.job_id] = progress
        self._persist()

    def mark_inactive(self, job_id: int) -> None:
        entry = self.state.entries.get(job_id)
        if entry is None:
            return

        self.state.entries[job_id] = entry.model_copy(
            update={"status": BackupStatus.INACTIVE, "timestamp": utc_now()}
        )
        self._persist()

    def _persist(self) -> None:
        self.state.updated_at = utc_now()
        write_text_atomic(self.state_path, self.state.model_dump_json(indent=2))


def load_state(state_path: Path) -> GlobalState:
    """Load a state file written by JsonStateWriter.

    Returns an empty state when the file is missing, empty or unreadable.
    """
    state_path = Path(state_path)
    if not state_path.exists():
        return GlobalState()

    text = state_path.read_text(encoding="utf-8")
    if not text.strip():
        return GlobalState()

    try:
        return GlobalState.model_validate_json(text)
    except ValidationError as e:
        logger.warning(f"Ignoring unreadable state file {state_path}: {e}")
        return GlobalState()
