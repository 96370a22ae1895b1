from __future__ import annotations

"""
Recursive Directory Walking Service.

Enumerates directory trees in child-first order and builds recursive
removal on top of it: by the time a directory is visited, everything it
contained has already been handed to the visitor.
"""

import logging
from types import MappingProxyType
from typing import List, Optional

from fslib.domain.errors import InvalidPathError
from fslib.domain.search_models import DirEntry, WalkVisitor
from fslib.infra.fs import FileSystem, get_default_fs

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def walk_dir(path: str, visitor: WalkVisitor, fs: Optional[FileSystem] = None) -> None:
    """
    Walk a directory recursively, children before their parent.

    The complete listing is collected before the first visitor call, so a
    visitor may safely delete what it is handed. Symlinked directories are
    reported as entries but never descended into. Sibling order is the one
    of the underlying listing and must not be relied upon.

    Args:
        path: Directory to walk.
        visitor: Called as visitor(entry, position, args) for each descendant,
                 args being {"path": path}.
        fs: Storage API, the local disk by default.

    Raises:
        InvalidPathError: If path does not resolve to an existing directory.
    """
    fs = fs or get_default_fs()

    real_path = fs.resolve_canonical_path(path)
    if real_path is None or not fs.is_directory(real_path):
        raise InvalidPathError(f"Passed path \"{path}\" ({real_path!r}) isn't a directory")

    entries: List[DirEntry] = []
    _collect_child_first(fs, real_path, entries)

    args = MappingProxyType({"path": path})
    for position, entry in enumerate(entries):
        visitor(entry, position, args)


def remove_dir(path: str, fs: Optional[FileSystem] = None) -> None:
    """
    Remove a directory and everything below it.

    Symlinks are unlinked, never followed. Metadata cached by the caller
    (os.stat results, pathlib objects) is not invalidated.

    Args:
        path: Directory to remove.
        fs: Storage API, the local disk by default.

    Raises:
        InvalidPathError: If path does not resolve to an existing directory.
    """
    fs = fs or get_default_fs()

    def _delete_entry(entry: DirEntry, position: int, args) -> None:
        if entry.is_dir:
            fs.remove_empty_directory(entry.path)
        else:
            fs.delete_file(entry.path)

    walk_dir(path, _delete_entry, fs)
    fs.remove_empty_directory(path)
    logger.debug(f"Removed directory tree '{path}'")


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _collect_child_first(fs: FileSystem, directory: str, out: List[DirEntry]) -> None:
    """
    Append the descendants of directory to out, deepest first.

    Only real directories are entered, so every entry is reached through
    exactly one path below the canonical root.
    """
    for entry in fs.list_directory_entries(directory, include_dot_entries=False):
        if entry.is_dir:
            _collect_child_first(fs, entry.path, out)
        out.append(entry)
