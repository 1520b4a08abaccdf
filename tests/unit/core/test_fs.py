"""Unit tests for directory traversal helpers."""

import os
from pathlib import Path

import pytest

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import FileOperation


class TestEnsureDirectory:
    def test_existing_directory(self, tmp_path):
        assert ensure_directory(str(tmp_path)) == tmp_path

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SourceDirectoryError, match="does not exist"):
            ensure_directory(tmp_path / "nope")

    def test_file_is_not_directory(self, tmp_path, write_file):
        path = write_file(tmp_path / "a.txt", "x")

        with pytest.raises(SourceDirectoryError, match="not a directory"):
            ensure_directory(path)


class TestListFiles:
    def test_recursive_sorted(self, tmp_path, write_file):
        write_file(tmp_path / "b.png", b"b")
        write_file(tmp_path / "a.png", b"a")
        write_file(tmp_path / "sub" / "c.png", b"c")

        files = list_files(tmp_path)

        assert files == [tmp_path / "a.png", tmp_path / "b.png", tmp_path / "sub" / "c.png"]

    def test_top_level_only(self, tmp_path, write_file):
        write_file(tmp_path / "a.png", b"a")
        write_file(tmp_path / "sub" / "c.png", b"c")

        assert list_files(tmp_path, recursive=False) == [tmp_path / "a.png"]

    def test_empty_directory(self, tmp_path):
        assert list_files(tmp_path) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_skipped(self, tmp_path, write_file):
        target = write_file(tmp_path / "real.png", b"x")
        (tmp_path / "link.png").symlink_to(target)

        assert list_files(tmp_path) == [target]

    def test_walk_error_recorded(self, tmp_path):
        warnings = []

        files = list_files(tmp_path / "gone", warnings=warnings)

        assert files == []
        assert len(warnings) == 1
        assert warnings[0].operation == FileOperation.list

    def test_paths_not_resolved(self, tmp_path, write_file, monkeypatch):
        write_file(tmp_path / "assets" / "a.png", b"a")
        monkeypatch.chdir(tmp_path)

        assert list_files("assets") == [Path("assets") / "a.png"]


def test_filter_by_extension_case_insensitive():
    files = [Path("a.PNG"), Path("b.jpg"), Path("c.txt"), Path("noext")]

    assert filter_by_extension(files, [".png", ".JPG"]) == [Path("a.PNG"), Path("b.jpg")]
