"""Utility functions for path operations."""

import contextlib
import os
from pathlib import Path
from typing import Optional, Union

from ..util.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


def is_blank(path: Optional[PathLike]) -> bool:
    """Return True for None, empty or whitespace-only paths."""
    return path is None or not str(path).strip()


def require_path(path: Optional[PathLike], role: str = "path") -> str:
    """Return ``path`` as a string, raising ValueError when it is blank."""
    if is_blank(path):
        raise ValueError(f"{role} must not be empty: {path!r}")
    return str(path)


def ensure_directory(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_text_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` without exposing a half-written file."""
    ensure_directory(path.parent)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
    logger.debug(f"Wrote {path}")


def format_size(size_bytes: int) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    i = 0
    while size >= 1024.0 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"
