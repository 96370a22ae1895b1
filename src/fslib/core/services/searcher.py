from __future__ import annotations

"""
Pattern and Content Search Service.

Finds files by glob patterns, optionally filters them by content and
descends into subdirectories matching a second set of patterns. Results
are always returned; a visitor, when given, is additionally called for
every matching file as it is found.
"""

import glob
import logging
import os
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fslib.core.components.filters import filter_by_contents, parse_needle
from fslib.domain.search_models import GlobFlag, SearchSpec, SearchVisitor
from fslib.infra.fs import FileSystem, get_default_fs, is_dot_entry

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def search(
        root_dir: str,
        list_flags: int = GlobFlag.NONE,
        file_patterns: Sequence[str] = (),
        recurse_dir_patterns: Sequence[str] = (),
        needle: Optional[str] = None,
        visitor: Optional[SearchVisitor] = None,
        visitor_args: Optional[Mapping[str, Any]] = None,
        fs: Optional[FileSystem] = None,
) -> List[str]:
    """
    Search files and directories by pattern and, optionally, by contents.

    Examples:
        # Every directory below root, hidden ones included
        search(root, GlobFlag.ONLYDIR, [], ["*", ".*"])

        # Every file mentioning "timeout", case-insensitively
        search(root, 0, ["*"], ["*"], "/timeout/i")

    Args:
        root_dir: Top level directory; an empty or missing one yields [].
        list_flags: GlobFlag values used when expanding file patterns.
        file_patterns: File name patterns, directories they match are dropped.
        recurse_dir_patterns: Subdirectory name patterns to descend into.
        needle: Substring to look for in files, or a "/regex/flags" literal.
                Matching directories are only reported when no needle is set.
        visitor: Called as visitor(path, args) for each matching file.
        visitor_args: Extra visitor arguments; "path" (root_dir) and "needle"
                      are added unless already present.
        fs: Storage API, the local disk by default.

    Returns:
        List[str]: Matching paths; files of a level, then its directories,
                   then the results of each subdirectory in turn.

    Raises:
        InvalidNeedleError: If a regular expression needle is malformed.
    """
    args: Dict[str, Any] = dict(visitor_args or {})
    args.setdefault("path", root_dir)
    args.setdefault("needle", needle)

    spec = SearchSpec(
        root_dir=root_dir,
        list_flags=GlobFlag(list_flags),
        file_patterns=tuple(file_patterns),
        recurse_dir_patterns=tuple(recurse_dir_patterns),
        needle=parse_needle(needle),
        visitor=visitor,
        visitor_args=MappingProxyType(args),
    )
    return _search_level(spec, fs or get_default_fs())


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _search_level(spec: SearchSpec, fs: FileSystem) -> List[str]:
    """Search one directory, then recurse into the matching subdirectories."""
    if not spec.root_dir:
        return []

    found: List[str] = []

    # 1. Files
    for pattern in spec.file_patterns:
        matches = [
            path for path in fs.expand_glob(_join(spec.root_dir, pattern), spec.list_flags)
            if not fs.is_directory(path)
        ]
        if spec.needle is not None:
            matches = filter_by_contents(fs, matches, spec.needle)

        if spec.visitor is not None:
            for path in matches:
                spec.visitor(path, spec.visitor_args)

        found.extend(matches)

    # 2. Subdirectories
    subdirs: List[str] = []
    for pattern in spec.recurse_dir_patterns:
        subdirs.extend(
            path for path in fs.expand_glob(_join(spec.root_dir, pattern), GlobFlag.ONLYDIR)
            if not is_dot_entry(path)
        )

    if spec.needle is None:
        found.extend(subdirs)

    for subdir in subdirs:
        logger.debug(f"Descending into '{subdir}'")
        found.extend(_search_level(spec.descend(subdir), fs))

    return found


def _join(directory: str, pattern: str) -> str:
    """Join a literal directory with a pattern, escaping glob characters in the former."""
    return os.path.join(glob.escape(directory), pattern)
