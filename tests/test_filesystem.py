"""Tests for the local filesystem backend."""

import os
import tempfile
from pathlib import Path

import pytest

from dirsave.fs.filesystem import LocalFileSystem


@pytest.fixture
def tree():
    """A small directory tree: root/{b.txt, a.txt, docs/{c.txt}, assets/}."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        (root / "b.txt").write_text("bb")
        (root / "a.txt").write_text("a")
        (root / "docs").mkdir()
        (root / "docs" / "c.txt").write_text("ccc")
        (root / "assets").mkdir()
        yield root


class TestLocalFileSystem:
    """Test local filesystem operations."""

    def test_enumerate_files_sorted(self, tree):
        """Test that only files are listed, sorted."""
        fs = LocalFileSystem()

        assert fs.enumerate_files(str(tree)) == [str(tree / "a.txt"), str(tree / "b.txt")]

    def test_enumerate_directories_sorted(self, tree):
        """Test that only directories are listed, sorted."""
        fs = LocalFileSystem()

        assert fs.enumerate_directories(str(tree)) == [str(tree / "assets"), str(tree / "docs")]

    def test_enumerate_missing_directory(self, tree):
        """Test that listing a missing directory raises."""
        with pytest.raises(FileNotFoundError):
            LocalFileSystem().enumerate_files(str(tree / "nope"))

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_directory_symlinks_not_followed(self, tree):
        """Test that a symlinked directory is not listed as a subdirectory."""
        (tree / "link").symlink_to(tree / "docs", target_is_directory=True)

        assert str(tree / "link") not in LocalFileSystem().enumerate_directories(str(tree))

    def test_file_size(self, tree):
        """Test reading a file size."""
        assert LocalFileSystem().get_file_size(str(tree / "docs" / "c.txt")) == 3

    def test_file_size_missing(self, tree):
        """Test that the size of a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            LocalFileSystem().get_file_size(str(tree / "missing.txt"))

    def test_exists_checks(self, tree):
        """Test file and directory existence checks."""
        fs = LocalFileSystem()

        assert fs.file_exists(str(tree / "a.txt"))
        assert not fs.file_exists(str(tree / "docs"))
        assert fs.directory_exists(str(tree / "docs"))
        assert not fs.directory_exists(str(tree / "a.txt"))

    def test_create_directory_is_idempotent(self, tree):
        """Test creating nested directories twice."""
        fs = LocalFileSystem()
        target = tree / "x" / "y" / "z"

        fs.create_directory(str(target))
        fs.create_directory(str(target))

        assert target.is_dir()

    def test_ensure_parent_directory(self, tree):
        """Test creating the parent of a file path."""
        target = tree / "new" / "file.txt"

        LocalFileSystem().ensure_parent_directory(str(target))

        assert target.parent.is_dir()
        assert not target.exists()

    def test_copy_file_overwrite(self, tree):
        """Test that overwrite replaces an existing file."""
        fs = LocalFileSystem()

        fs.copy_file(str(tree / "b.txt"), str(tree / "a.txt"), overwrite=True)

        assert (tree / "a.txt").read_text() == "bb"

    def test_copy_file_without_overwrite(self, tree):
        """Test that an existing destination raises when overwrite is off."""
        with pytest.raises(FileExistsError):
            LocalFileSystem().copy_file(str(tree / "b.txt"), str(tree / "a.txt"), overwrite=False)

    @pytest.mark.parametrize("path", [None, "", "  "])
    def test_blank_paths_rejected(self, path):
        """Test that blank paths raise ValueError."""
        fs = LocalFileSystem()

        with pytest.raises(ValueError):
            fs.directory_exists(path)
        with pytest.raises(ValueError):
            fs.file_exists(path)
        with pytest.raises(ValueError):
            fs.enumerate_files(path)

    def test_join_and_relative_path(self):
        """Test path composition helpers."""
        fs = LocalFileSystem()

        assert fs.join("/dst", "docs/c.txt") == os.path.join("/dst", "docs/c.txt")
        assert fs.relative_path("/src", "/src/docs/c.txt") == os.path.join("docs", "c.txt")
        with pytest.raises(ValueError):
            fs.join("/dst", "")
        with pytest.raises(ValueError):
            fs.join()

    def test_copy_file_onto_directory(self, tree):
        """Test that copying onto an existing directory raises instead of copying into it."""
        with pytest.raises(IsADirectoryError):
            LocalFileSystem().copy_file(str(tree / "a.txt"), str(tree / "docs"), overwrite=True)

        assert not (tree / "docs" / "a.txt").exists()

    def test_parent(self):
        """Test the directory part of a path."""
        fs = LocalFileSystem()

        assert fs.parent("/dst/docs/c.txt") == "/dst/docs"
        with pytest.raises(ValueError):
            fs.parent(" ")
