"""Utility functions for logging setup."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "dirsave"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """Set up diagnostic logging with Rich formatting."""

    if console is None:
        console = Console(stderr=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=level.upper() == "DEBUG",
        rich_tracebacks=True,
    )
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)

        # Detailed format for file
        file_format = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
