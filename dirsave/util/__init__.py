"""Utility module initialization."""

from .logging import get_logger, setup_logging
from .paths import (
    ensure_directory,
    format_size,
    is_blank,
    require_path,
    write_text_atomic,
)
from .timeutil import format_duration, to_utc, utc_now

__all__ = [
    # logging
    "get_logger",
    "setup_logging",
    # paths
    "ensure_directory",
    "format_size",
    "is_blank",
    "require_path",
    "write_text_atomic",
    # timeutil
    "format_duration",
    "to_utc",
    "utc_now",
]
