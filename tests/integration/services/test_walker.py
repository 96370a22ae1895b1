from __future__ import annotations

"""
Integration tests for the Recursive Directory Walking Service.

Verifies child-first ordering, the visitor contract and recursive removal.
"""

import os
from pathlib import Path
from typing import Any, List, Mapping, Tuple
from unittest.mock import MagicMock

import pytest

from fslib import DirEntry, InvalidPathError, remove_dir, walk_dir
from fslib.infra.fs import FileSystem


def _walk(root: Path) -> List[Tuple[DirEntry, int, Mapping[str, Any]]]:
    visited: List[Tuple[DirEntry, int, Mapping[str, Any]]] = []
    walk_dir(str(root), lambda entry, position, args: visited.append((entry, position, args)))
    return visited


def _relative(root: Path, entry: DirEntry) -> str:
    return os.path.relpath(entry.path, os.path.realpath(str(root))).replace(os.sep, "/")


# -----------------------------------------------------------------------------
# WALKING
# -----------------------------------------------------------------------------

def test_invalid_dir() -> None:
    """The message carries the original path and the resolution result."""
    with pytest.raises(InvalidPathError) as exc:
        walk_dir("./tests/invalid/path", lambda *a: None)

    assert str(exc.value) == "Passed path \"./tests/invalid/path\" (None) isn't a directory"


def test_walking_a_file_is_invalid(dir_tree: Path) -> None:
    with pytest.raises(InvalidPathError, match="isn't a directory"):
        walk_dir(str(dir_tree / "file"), lambda *a: None)


def test_walking(dir_tree: Path) -> None:
    """Every descendant is visited exactly once."""
    structure = sorted(
        f"[{'D' if entry.is_dir else 'F'}] {_relative(dir_tree, entry)}"
        for entry, _, _ in _walk(dir_tree)
    )

    assert structure == [
        "[D] dir1",
        "[D] dir1/dir11",
        "[D] dir1/dir11/dir111",
        "[D] dir2",
        "[D] dir2/dir22",
        "[D] dir3",
        "[F] dir1/dir11/dir111/deepFile",
        "[F] file",
    ]


def test_walking_is_child_first(dir_tree: Path) -> None:
    order = [_relative(dir_tree, entry) for entry, _, _ in _walk(dir_tree)]

    assert order.index("dir1/dir11/dir111/deepFile") < order.index("dir1/dir11/dir111")
    assert order.index("dir1/dir11/dir111") < order.index("dir1/dir11")
    assert order.index("dir1/dir11") < order.index("dir1")
    assert order.index("dir2/dir22") < order.index("dir2")
    assert len(order) == len(set(order)) == 8


def test_visitor_receives_positions_and_original_path(dir_tree: Path) -> None:
    visited = _walk(dir_tree)

    assert [position for _, position, _ in visited] == list(range(8))
    assert all(dict(args) == {"path": str(dir_tree)} for _, _, args in visited)


def test_visitor_args_are_read_only(dir_tree: Path) -> None:
    visited = _walk(dir_tree)

    with pytest.raises(TypeError):
        visited[0][2]["path"] = "elsewhere"  # type: ignore[index]


def test_entries_expose_canonical_paths(dir_tree: Path) -> None:
    for entry, _, _ in _walk(dir_tree):
        assert entry.real_path == os.path.realpath(entry.path)
        assert entry.name == os.path.basename(entry.path)


@pytest.mark.skipif(os.name == "nt", reason="symlinks required")
def test_symlinked_directories_are_not_descended(dir_tree: Path) -> None:
    """A link to a sibling directory is reported once and never entered."""
    (dir_tree / "dir3" / "loop").symlink_to(dir_tree / "dir1", target_is_directory=True)

    order = [_relative(dir_tree, entry) for entry, _, _ in _walk(dir_tree)]

    assert "dir3/loop" in order
    assert not any(p.startswith("dir3/loop/") for p in order)
    assert len(order) == 9


@pytest.mark.skipif(os.name == "nt", reason="symlinks required")
def test_file_and_its_link_are_separate_entries(dir_tree: Path) -> None:
    """Two names sharing a canonical path are both reported, each once."""
    (dir_tree / "dir3" / "alias").symlink_to(dir_tree / "file")

    visited = _walk(dir_tree)
    order = [_relative(dir_tree, entry) for entry, _, _ in visited]
    shared = [entry for entry, _, _ in visited if entry.real_path == os.path.realpath(str(dir_tree / "file"))]

    assert sorted(_relative(dir_tree, entry) for entry in shared) == ["dir3/alias", "file"]
    assert len(order) == len(set(order)) == 9


def test_walk_snapshot_precedes_visits() -> None:
    """Listing completes before the first visitor call."""
    calls: List[str] = []

    def _list(path: str, include_dot_entries: bool = False) -> List[DirEntry]:
        calls.append("list")
        return [DirEntry("a", "/root/a", "/root/a", False), DirEntry("b", "/root/b", "/root/b", False)]

    fs = MagicMock(spec=FileSystem)
    fs.resolve_canonical_path.return_value = "/root"
    fs.is_directory.return_value = True
    fs.list_directory_entries.side_effect = _list

    walk_dir("/root", lambda *a: calls.append("visit"), fs)

    assert calls == ["list", "visit", "visit"]
    fs.list_directory_entries.assert_called_once_with("/root", include_dot_entries=False)


# -----------------------------------------------------------------------------
# REMOVAL
# -----------------------------------------------------------------------------

def test_removing(dir_tree: Path) -> None:
    remove_dir(str(dir_tree))

    assert not dir_tree.is_dir()


def test_removing_empty_directory(tmp_path: Path) -> None:
    target = tmp_path / "empty"
    target.mkdir()

    remove_dir(str(target))

    assert not target.exists()


def test_removing_deep_tree(tmp_path: Path) -> None:
    root = tmp_path / "deep"
    current = root
    for depth in range(30):
        current = current / f"level{depth}"
    current.mkdir(parents=True)
    (current / "leaf.txt").write_text("x")
    (root / ".hidden").write_text("x")

    remove_dir(str(root))

    assert not root.exists()


@pytest.mark.skipif(os.name == "nt", reason="symlinks required")
def test_removing_unlinks_symlinks_without_following(dir_tree: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep")
    (dir_tree / "dir3" / "link").symlink_to(outside, target_is_directory=True)

    remove_dir(str(dir_tree))

    assert not dir_tree.exists()
    assert (outside / "keep.txt").read_text() == "keep"


@pytest.mark.skipif(os.name == "nt", reason="symlinks required")
def test_removing_tree_with_link_to_inner_file(dir_tree: Path) -> None:
    (dir_tree / "dir2" / "alias").symlink_to(dir_tree / "dir1" / "dir11" / "dir111" / "deepFile")

    remove_dir(str(dir_tree))

    assert not dir_tree.exists()


def test_removing_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidPathError):
        remove_dir(str(tmp_path / "missing"))


def test_removing_propagates_storage_errors(dir_tree: Path) -> None:
    fs = FileSystem()
    failing = MagicMock(wraps=fs)
    failing.delete_file.side_effect = PermissionError("denied")

    with pytest.raises(PermissionError):
        remove_dir(str(dir_tree), failing)

    assert dir_tree.is_dir()
