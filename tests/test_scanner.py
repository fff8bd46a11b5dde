"""Tests for directory size calculation."""

import os
from pathlib import Path

import pytest

from dropmodules.scanner import expand_path, get_directory_size


class TestExpandPath:
    def test_expands_tilde(self):
        result = expand_path("~/test")
        assert str(result).startswith(str(Path.home()))

    def test_handles_absolute_path(self):
        result = expand_path("/absolute/path")
        assert str(result) == "/absolute/path"


class TestGetDirectorySize:
    def test_empty_directory(self, tmp_path):
        assert get_directory_size(tmp_path) == 0

    def test_directory_with_files(self, tmp_path):
        (tmp_path / "test.txt").write_text("Hello, World!")
        assert get_directory_size(tmp_path) == len("Hello, World!")

    def test_nested_directory(self, tmp_path):
        """Files at every depth are counted, directories add nothing."""
        subdir = tmp_path / "subdir" / "deeper"
        subdir.mkdir(parents=True)
        (tmp_path / "top.txt").write_bytes(b"x" * 10)
        (tmp_path / "subdir" / "mid.txt").write_bytes(b"x" * 20)
        (subdir / "low.txt").write_bytes(b"x" * 30)

        assert get_directory_size(tmp_path) == 60

    def test_accepts_string_path(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"abc")
        assert get_directory_size(str(tmp_path)) == 3

    def test_symlink_counts_link_not_target(self, tmp_path):
        """A symlinked directory is not followed."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"x" * 5000)

        measured = tmp_path / "measured"
        measured.mkdir()
        link = measured / "link"
        try:
            link.symlink_to(outside, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        assert get_directory_size(measured) == os.lstat(link).st_size
        assert get_directory_size(measured) < 5000

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_directory_size(tmp_path / "missing")

    def test_file_instead_of_directory_raises(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(NotADirectoryError):
            get_directory_size(path)

    def test_unreadable_subdirectory_aborts(self, tmp_path, monkeypatch):
        """One unreadable branch fails the whole calculation."""
        (tmp_path / "ok").mkdir()
        (tmp_path / "ok" / "a.txt").write_text("aaaa")
        locked = tmp_path / "locked"
        locked.mkdir()

        real_scandir = os.scandir

        def fake_scandir(path):
            if os.fspath(path) == str(locked):
                raise PermissionError(13, "Permission denied", str(locked))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)

        with pytest.raises(PermissionError):
            get_directory_size(tmp_path)
