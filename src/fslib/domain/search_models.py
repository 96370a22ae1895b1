from __future__ import annotations

"""
Directory Toolkit Data Models.

Provides the glob flag set, the directory entry DTO, the needle variants
used for content filtering, the per-call search parameters and an
explicit accumulator usable as a search visitor.
"""

import re
from dataclasses import dataclass, field, replace
from enum import IntFlag
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

# -----------------------------------------------------------------------------
# LISTING PRIMITIVES
# -----------------------------------------------------------------------------

class GlobFlag(IntFlag):
    """Flags altering glob expansion."""
    NONE = 0
    ONLYDIR = 1   # Keep directories only
    MARK = 2      # Append a separator to each directory
    NOSORT = 4    # Keep listing order instead of sorting
    BRACE = 8     # Expand {a,b} alternatives


@dataclass(frozen=True)
class DirEntry:
    """
    A single directory listing entry.

    Attributes:
        name: Base name of the entry.
        path: Entry path under its (canonical) parent, symlinks unresolved.
        real_path: Fully resolved canonical path.
        is_dir: True for real directories (symlinks are not followed).
    """
    name: str
    path: str
    real_path: str
    is_dir: bool


# -----------------------------------------------------------------------------
# NEEDLE VARIANTS
# -----------------------------------------------------------------------------

REGEX_MARKER = "/"


@dataclass(frozen=True)
class LiteralNeedle:
    """Case-sensitive substring needle."""
    text: str

    def matches(self, contents: str) -> bool:
        return self.text in contents


@dataclass(frozen=True)
class RegexNeedle:
    """
    Regular expression needle compiled from a "/pattern/flags" literal.

    Attributes:
        pattern: Compiled expression, flags included.
    """
    pattern: re.Pattern

    def matches(self, contents: str) -> bool:
        return self.pattern.search(contents) is not None


Needle = Union[LiteralNeedle, RegexNeedle]


# -----------------------------------------------------------------------------
# SEARCH CONTRACTS
# -----------------------------------------------------------------------------

SearchVisitor = Callable[[str, Mapping[str, Any]], None]
WalkVisitor = Callable[[DirEntry, int, Mapping[str, Any]], None]


@dataclass(frozen=True)
class SearchSpec:
    """
    Parameters of one search level.

    Recursion derives deeper specs through descend(); everything but the
    root directory is shared with the parent level.
    """
    root_dir: str
    list_flags: GlobFlag = GlobFlag.NONE
    file_patterns: Tuple[str, ...] = ()
    recurse_dir_patterns: Tuple[str, ...] = ()
    needle: Optional[Needle] = None
    visitor: Optional[SearchVisitor] = None
    visitor_args: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def descend(self, subdir: str) -> "SearchSpec":
        return replace(self, root_dir=subdir)


class SearchCollector:
    """
    Accumulates search hits when passed as a visitor.

    Example:
        collector = SearchCollector()
        search(root, 0, ["*.log"], ["*"], "ERROR", collector)
        collector.paths  # every file containing "ERROR"
    """

    def __init__(self) -> None:
        self._hits: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, path: str, args: Mapping[str, Any]) -> None:
        self.append(path, args)

    def append(self, path: str, args: Mapping[str, Any]) -> None:
        self._hits.append((path, dict(args)))

    @property
    def hits(self) -> Sequence[Tuple[str, Dict[str, Any]]]:
        return tuple(self._hits)

    @property
    def paths(self) -> List[str]:
        return [path for path, _ in self._hits]

    def __len__(self) -> int:
        return len(self._hits)
