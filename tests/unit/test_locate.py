"""Tests for locate() input discovery."""

import importlib
import os

import pytest

from pqconsolidator._exceptions import (
    LocateError,
    NotTargetFormatError,
    PathNotFoundError,
)
from pqconsolidator.locate import locate


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def tree(tmp_path):
    """Empty placeholder files; locate() never opens them."""
    root = tmp_path / "root"
    _touch(root / "b.parquet")
    _touch(root / "a.PARQUET")
    _touch(root / "notes.txt")
    _touch(root / "sub" / "c.Parquet")
    _touch(root / "sub" / "deeper" / "d.parquet")
    _touch(root / "sub" / "deeper" / "e.csv")
    return root


class TestLocateFile:

    def test_single_parquet_file(self, tmp_path):
        path = _touch(tmp_path / "test.parquet")
        assert locate(path) == [path]

    def test_single_file_extension_case_insensitive(self, tmp_path):
        path = _touch(tmp_path / "TEST.PARQUET")
        assert locate(path, recursive=True) == [path]

    def test_non_parquet_file_raises(self, tmp_path):
        path = _touch(tmp_path / "single_text_file.txt")

        with pytest.raises(NotTargetFormatError, match="not a parquet file"):
            locate(path)

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(PathNotFoundError, match="not found"):
            locate(tmp_path / "missing")

    def test_errors_are_locate_errors(self, tmp_path):
        path = _touch(tmp_path / "x.txt")
        with pytest.raises(LocateError) as exc_info:
            locate(path)
        assert exc_info.value.path == path


class TestLocateDirectory:

    def test_non_recursive_only_immediate_children(self, tree):
        result = locate(tree, recursive=False)

        assert [p.name for p in result] == ["a.PARQUET", "b.parquet"]

    def test_recursive_full_subtree(self, tree):
        result = locate(tree, recursive=True)

        assert [p.name for p in result] == [
            "a.PARQUET",
            "b.parquet",
            "c.Parquet",
            "d.parquet",
        ]

    def test_sorted_by_full_path(self, tree):
        result = locate(tree, recursive=True)
        assert result == sorted(result, key=str)

    def test_deterministic(self, tree):
        assert locate(tree, recursive=True) == locate(tree, recursive=True)
        assert locate(tree, recursive=False) == locate(tree, recursive=False)

    def test_recursive_is_superset(self, tree):
        flat = set(locate(tree, recursive=False))
        deep = set(locate(tree, recursive=True))
        assert flat <= deep

    def test_empty_directory_returns_empty_list(self, tmp_path):
        assert locate(tmp_path) == []
        assert locate(tmp_path, recursive=True) == []

    def test_directory_named_like_parquet_ignored(self, tmp_path):
        (tmp_path / "partition.parquet").mkdir()
        _touch(tmp_path / "partition.parquet" / "part-0.parquet")

        assert locate(tmp_path) == []
        assert [p.name for p in locate(tmp_path, recursive=True)] == ["part-0.parquet"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_cycle_not_followed(self, tree):
        try:
            os.symlink(tree, tree / "sub" / "loop", target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlink")

        result = locate(tree, recursive=True)

        assert len(result) == 4
        assert len(set(result)) == len(result)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits not enforced for root",
    )
    def test_unreadable_subdirectory_skipped(self, tree):
        blocked = tree / "sub"
        blocked.chmod(0)
        try:
            result = locate(tree, recursive=True)
        finally:
            blocked.chmod(0o755)

        assert [p.name for p in result] == ["a.PARQUET", "b.parquet"]

    def test_unlistable_root_raises(self, tree, monkeypatch):
        locate_module = importlib.import_module("pqconsolidator.locate")

        def _deny(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(locate_module.os, "scandir", _deny)

        with pytest.raises(LocateError, match="Cannot access"):
            locate(tree)
