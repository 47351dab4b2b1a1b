"""Single-file transfer with timing and outcome-encoded errors."""

import time

from pydantic import BaseModel, Field

from ..util.logging import get_logger
from ..util.paths import is_blank
from .filesystem import FileSystem

logger = get_logger(__name__)


class TransferErrorCode:
    """Reserved transfer error codes. Other nonzero values are OS errno values."""

    NONE = 0
    INVALID_SOURCE_PATH = -1
    INVALID_DESTINATION_PATH = -2
    SOURCE_NOT_FOUND = -3
    UNKNOWN_IO_ERROR = -4


class TransferOutcome(BaseModel):
    """Result of one file copy attempt."""

    file_size_bytes: int = Field(default=0, description="Bytes transferred (or known before failing)")
    transfer_time_ms: int = Field(default=0, description="Elapsed milliseconds, negative on failure")
    error_code: int = Field(default=TransferErrorCode.NONE, description="0 on success")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def is_success(self) -> bool:
        return self.error_code == TransferErrorCode.NONE

    @classmethod
    def success(cls, file_size_bytes: int, transfer_time_ms: int) -> "TransferOutcome":
        return cls(file_size_bytes=file_size_bytes, transfer_time_ms=transfer_time_ms)

    @classmethod
    def invalid_source_path(cls) -> "TransferOutcome":
        return cls(transfer_time_ms=-1, error_code=TransferErrorCode.INVALID_SOURCE_PATH)

    @classmethod
    def invalid_destination_path(cls) -> "TransferOutcome":
        return cls(transfer_time_ms=-1, error_code=TransferErrorCode.INVALID_DESTINATION_PATH)

    @classmethod
    def source_not_found(cls) -> "TransferOutcome":
        return cls(transfer_time_ms=-1, error_code=TransferErrorCode.SOURCE_NOT_FOUND)

    @classmethod
    def failure(cls, file_size_bytes: int, elapsed_ms: int, error_code: int) -> "TransferOutcome":
        """Failed copy. The time is negated and at least 1ms in magnitude."""
        return cls(
            file_size_bytes=file_size_bytes,
            transfer_time_ms=-max(1, elapsed_ms),
            error_code=error_code or TransferErrorCode.UNKNOWN_IO_ERROR,
        )


class TransferService:
    """Base class for file transfer backends."""

    def transfer_file(self, source: str, destination: str, overwrite: bool = True) -> TransferOutcome:
        raise NotImplementedError


class LocalTransferService(TransferService):
    """Copies files through a FileSystem and reports a TransferOutcome.

    Ordinary failures never raise; they come back in the outcome's
    ``error_code`` so callers can keep going on the next file.
    """

    def __init__(self, filesystem: FileSystem) -> None:
        if filesystem is None:
            raise ValueError("filesystem is required")
        self.filesystem = filesystem

    def transfer_file(self, source: str, destination: str, overwrite: bool = True) -> TransferOutcome:
        """Copy ``source`` to ``destination``.

        Args:
            source: Source file path
            destination: Destination file path
            overwrite: Replace an existing destination file

        Returns:
            TransferOutcome with the size, elapsed time and error code
        """
        if is_blank(source):
            return TransferOutcome.invalid_source_path()
        if is_blank(destination):
            return TransferOutcome.invalid_destination_path()

        size_bytes = 0
        started = time.perf_counter()

        try:
            if not self.filesystem.file_exists(source):
                logger.debug(f"Transfer source not found: {source}")
                return TransferOutcome.source_not_found()

            size_bytes = self.filesystem.get_file_size(source)
            self.filesystem.ensure_parent_directory(destination)
            self.filesystem.copy_file(source, destination, overwrite)

        except OSError as e:
            elapsed_ms = _elapsed_ms(started)
            logger.debug(f"Transfer failed {source} -> {destination}: {e}")
            return TransferOutcome.failure(size_bytes, elapsed_ms, e.errno or TransferErrorCode.UNKNOWN_IO_ERROR)

        return TransferOutcome.success(size_bytes, _elapsed_ms(started))


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
