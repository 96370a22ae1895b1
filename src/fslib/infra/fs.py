from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the storage primitives consumed by the rotating logger and the
directory toolkit: canonical path resolution, existence and size checks,
directory listing, glob expansion, raw reads/appends and entry mutation.
Acts as an abstraction over the 'os' and 'glob' modules so that services
can be exercised against an injected implementation.
"""

import glob
import os
from typing import List, Optional

from fslib.domain.search_models import DirEntry, GlobFlag

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

DOT_ENTRIES = (".", "..")


# -----------------------------------------------------------------------------
# LOCAL STORAGE API
# -----------------------------------------------------------------------------

class FileSystem:
    """
    Local disk implementation of the storage API.

    Every method is a thin blocking wrapper; OSError subclasses raised by
    the operating system propagate unmodified.
    """

    # --- Path resolution ------------------------------------------------------

    def resolve_canonical_path(self, path: str) -> Optional[str]:
        """
        Resolve symlinks and relative components of an existing path.

        Args:
            path: Raw path string.

        Returns:
            Optional[str]: Canonical absolute path, or None if nothing exists there.
        """
        real_path = os.path.realpath(path)
        if not os.path.exists(real_path):
            return None
        return real_path

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def file_size(self, path: str) -> int:
        return os.path.getsize(path)

    # --- Listing --------------------------------------------------------------

    def list_directory_entries(self, path: str, include_dot_entries: bool = False) -> List[DirEntry]:
        """
        Snapshot the direct children of a directory.

        Args:
            path: Directory to list.
            include_dot_entries: Whether to report '.' and '..' as well.

        Returns:
            List[DirEntry]: Entries in the order reported by the OS.
        """
        entries: List[DirEntry] = []
        if include_dot_entries:
            for name in DOT_ENTRIES:
                entry_path = os.path.join(path, name)
                entries.append(DirEntry(name, entry_path, os.path.realpath(entry_path), True))

        with os.scandir(path) as it:
            for item in it:
                entries.append(DirEntry(
                    name=item.name,
                    path=item.path,
                    real_path=os.path.realpath(item.path),
                    is_dir=item.is_dir(follow_symlinks=False),
                ))
        return entries

    def expand_glob(self, pattern_path: str, flags: int = GlobFlag.NONE) -> List[str]:
        """
        Expand a shell-style pattern into matching paths.

        Hidden entries only match patterns whose component starts with '.'.
        A pattern under a missing directory yields an empty list.

        Args:
            pattern_path: Pattern including its directory part.
            flags: Combination of GlobFlag values.

        Returns:
            List[str]: Matching paths.
        """
        flags = GlobFlag(flags)
        patterns = expand_braces(pattern_path) if flags & GlobFlag.BRACE else [pattern_path]

        matches: List[str] = []
        for pattern in patterns:
            found = glob.glob(pattern)
            if not flags & GlobFlag.NOSORT:
                found.sort()
            matches.extend(found)

        if flags & GlobFlag.ONLYDIR:
            matches = [p for p in matches if os.path.isdir(p)]

        if flags & GlobFlag.MARK:
            matches = [
                p + os.sep if os.path.isdir(p) and not p.endswith(os.sep) else p
                for p in matches
            ]

        return matches

    # --- Contents -------------------------------------------------------------

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def append_file(self, path: str, data: bytes) -> None:
        with open(path, "ab") as f:
            f.write(data)

    # --- Mutation -------------------------------------------------------------

    def rename_entry(self, src: str, dst: str) -> None:
        os.replace(src, dst)

    def delete_file(self, path: str) -> None:
        os.unlink(path)

    def remove_empty_directory(self, path: str) -> None:
        os.rmdir(path)

    def set_permissions(self, path: str, mode: int) -> None:
        os.chmod(path, mode)


# -----------------------------------------------------------------------------
# PATTERN HELPERS
# -----------------------------------------------------------------------------

def expand_braces(pattern: str) -> List[str]:
    """
    Expand the first top-level {a,b,...} group of a pattern, recursively.

    Unbalanced braces are left untouched.

    Args:
        pattern: Glob pattern possibly containing brace groups.

    Returns:
        List[str]: Patterns without brace groups, in alternative order.
    """
    start = pattern.find("{")
    if start < 0:
        return [pattern]

    depth = 0
    last = start + 1
    parts: List[str] = []
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "," and depth == 1:
            parts.append(pattern[last:i])
            last = i + 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                parts.append(pattern[last:i])
                prefix, suffix = pattern[:start], pattern[i + 1:]
                expanded: List[str] = []
                for part in parts:
                    expanded.extend(expand_braces(prefix + part + suffix))
                return expanded

    return [pattern]


def is_dot_entry(path: str) -> bool:
    """Check whether the last path component is '.' or '..'."""
    name = os.path.basename(path.rstrip(os.sep)) or path
    return name in DOT_ENTRIES


_default_fs = FileSystem()


def get_default_fs() -> FileSystem:
    """Return the shared local FileSystem instance."""
    return _default_fs
