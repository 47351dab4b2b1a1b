"""Event log writers."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from filelock import FileLock, Timeout

from ..util.logging import get_logger
from ..util.paths import write_text_atomic
from ..util.timeutil import to_utc
from .formatters import LogFormatter, get_formatter
from .models import LogRecord

if TYPE_CHECKING:
    from ..config import DirSaveConfig

logger = get_logger(__name__)

DEFAULT_LOCK_TIMEOUT = 10.0


class LogFileCorruptedError(ValueError):
    """The daily log file does not end with its container footer."""
    pass


class EventLogger:
    """Receives auditable LogRecords from a backup run."""

    def write(self, record: LogRecord) -> None:
        raise NotImplementedError


class NoOpLogger(EventLogger):
    """Discards every record. Used when the event log is disabled."""

    def write(self, record: LogRecord) -> None:
        return None


class DailyFileLogger(EventLogger):
    """Appends records to one log file per UTC day.

    Several processes may append to the same file; each write holds a
    file lock for at most ``lock_timeout`` seconds before giving up with
    TimeoutError.
    """

    def __init__(
        self,
        formatter: LogFormatter,
        log_dir: Path,
        fallback_dir: Optional[Path] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        """Initialize daily file logger.

        Args:
            formatter: Record formatter, also defines the file container
            log_dir: Directory the daily files are written to
            fallback_dir: Used when ``log_dir`` cannot be created
            lock_timeout: Seconds to wait for the cross-process lock
        """
        self.formatter = formatter
        self.log_dir = Path(log_dir)
        self.fallback_dir = Path(fallback_dir) if fallback_dir else None
        self.lock_timeout = lock_timeout

    def write(self, record: LogRecord) -> None:
        if record is None:
            raise ValueError("record is required")

        record = normalize_record(record)
        path = self.get_log_path(record)
        text = self.formatter.format(record)

        lock = FileLock(str(path) + ".lock", timeout=self.lock_timeout)
        try:
            with lock:
                self._append(path, text)
        except Timeout as e:
            raise TimeoutError(
                f"Unable to acquire log file lock within {self.lock_timeout}s: {path}"
            ) from e

    def get_log_path(self, record: LogRecord) -> Path:
        """Return the daily file for ``record``, creating its directory."""
        file_name = f"{record.timestamp:%Y-%m-%d}.{self.formatter.extension}"
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            return self.log_dir / file_name
        except OSError as e:
            if self.fallback_dir is None or self.fallback_dir.resolve() == self.log_dir.resolve():
                raise
            logger.warning(f"Cannot use log directory {self.log_dir} ({e}), falling back to {self.fallback_dir}")
            self.fallback_dir.mkdir(parents=True, exist_ok=True)
            return self.fallback_dir / file_name

    def _append(self, path: Path, text: str) -> None:
        fmt = self.formatter
        entry = _indent_block(text, fmt.indent)

        content = path.read_text(encoding="utf-8") if path.exists() else ""
        body = content.rstrip()

        if not body:
            new_content = f"{fmt.header}\n{entry}\n{fmt.footer}\n"
        else:
            if not body.endswith(fmt.footer):
                raise LogFileCorruptedError(f"Log file {path} does not end with {fmt.footer!r}")

            body = body[: -len(fmt.footer)].rstrip()
            is_empty = body == fmt.header.strip()
            separator = "" if is_empty else fmt.separator
            new_content = f"{body}{separator}\n{entry}\n{fmt.footer}\n"

        write_text_atomic(path, new_content)


def build_event_logger(config: "DirSaveConfig") -> EventLogger:
    """Pick the event logger configured for this installation."""
    settings = config.event_log
    if not settings.enabled:
        logger.debug("Event log disabled")
        return NoOpLogger()

    return DailyFileLogger(
        formatter=get_formatter(settings.format),
        log_dir=config.resolve_log_dir(),
        fallback_dir=config.default_log_dir,
        lock_timeout=settings.lock_timeout_seconds,
    )


def normalize_record(record: LogRecord) -> LogRecord:
    """Return a copy with a UTC timestamp and trimmed paths."""
    return record.with_changes(
        timestamp=to_utc(record.timestamp),
        source_path=(record.source_path or "").strip(),
        destination_path=(record.destination_path or "").strip(),
    )


def _indent_block(text: str, spaces: int) -> str:
    indent = " " * spaces
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return "\n".join(indent + line for line in lines)
