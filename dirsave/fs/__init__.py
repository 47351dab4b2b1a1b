"""Filesystem and transfer ports."""

from .filesystem import FileSystem, LocalFileSystem
from .transfer import LocalTransferService, TransferErrorCode, TransferOutcome, TransferService

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "LocalTransferService",
    "TransferErrorCode",
    "TransferOutcome",
    "TransferService",
]
