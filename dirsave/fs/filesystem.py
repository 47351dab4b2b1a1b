"""Filesystem access used by the backup engine and transfer service."""

import errno
import os
import shutil
from pathlib import Path
from typing import List

from ..util.logging import get_logger
from ..util.paths import require_path

logger = get_logger(__name__)


class FileSystem:
    """Base class for filesystem backends.

    Every path-taking method raises ``ValueError`` when given a None, empty
    or whitespace-only path.
    """

    def directory_exists(self, path: str) -> bool:
        raise NotImplementedError

    def create_directory(self, path: str) -> None:
        """Create ``path`` and any missing parents. No-op if it exists."""
        raise NotImplementedError

    def file_exists(self, path: str) -> bool:
        raise NotImplementedError

    def get_file_size(self, path: str) -> int:
        """Return the size of a file in bytes.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        raise NotImplementedError

    def enumerate_files(self, directory: str) -> List[str]:
        """List the files directly inside ``directory``, sorted by name."""
        raise NotImplementedError

    def enumerate_directories(self, directory: str) -> List[str]:
        """List the subdirectories directly inside ``directory``, sorted by name."""
        raise NotImplementedError

    def copy_file(self, source: str, destination: str, overwrite: bool) -> None:
        raise NotImplementedError

    def ensure_parent_directory(self, path: str) -> None:
        """Create the parent directory of a file path if it is missing."""
        raise NotImplementedError

    def join(self, *parts: str) -> str:
        """Compose a path from non-blank parts."""
        if not parts:
            raise ValueError("At least one path part is required")
        for part in parts:
            require_path(part, "path part")
        return os.path.join(*parts)

    def parent(self, path: str) -> str:
        """Return the directory part of ``path``."""
        return os.path.dirname(require_path(path))

    def relative_path(self, root: str, path: str) -> str:
        """Return ``path`` relative to ``root``."""
        return os.path.relpath(require_path(path, "path"), require_path(root, "root"))


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def directory_exists(self, path: str) -> bool:
        return Path(require_path(path)).is_dir()

    def create_directory(self, path: str) -> None:
        Path(require_path(path)).mkdir(parents=True, exist_ok=True)

    def file_exists(self, path: str) -> bool:
        return Path(require_path(path)).is_file()

    def get_file_size(self, path: str) -> int:
        file_path = Path(require_path(path))
        if not file_path.is_file():
            raise FileNotFoundError(errno.ENOENT, "File not found", str(file_path))
        return file_path.stat().st_size

    def enumerate_files(self, directory: str) -> List[str]:
        return self._list_entries(directory, want_dirs=False)

    def enumerate_directories(self, directory: str) -> List[str]:
        return self._list_entries(directory, want_dirs=True)

    def copy_file(self, source: str, destination: str, overwrite: bool) -> None:
        source = require_path(source, "source")
        destination = require_path(destination, "destination")

        if os.path.isdir(destination):
            raise IsADirectoryError(errno.EISDIR, "Destination is a directory", destination)
        if not overwrite and os.path.exists(destination):
            raise FileExistsError(errno.EEXIST, "Destination already exists", destination)

        shutil.copy2(source, destination)

    def ensure_parent_directory(self, path: str) -> None:
        parent = Path(require_path(path)).parent
        if not parent.is_dir():
            parent.mkdir(parents=True, exist_ok=True)

    def _list_entries(self, directory: str, want_dirs: bool) -> List[str]:
        # os.scandir raises FileNotFoundError / NotADirectoryError itself
        entries = []
        with os.scandir(require_path(directory, "directory")) as it:
            for entry in it:
                if want_dirs:
                    if entry.is_dir(follow_symlinks=False):
                        entries.append(entry.path)
                elif entry.is_file():
                    entries.append(entry.path)
        return sorted(entries)
