from __future__ import annotations

"""
Content Filtering Engine.

Turns raw needle strings into literal or regular expression matchers and
applies them to file contents. A needle starting with '/' is read as a
delimited expression with trailing flags ("/pattern/flags"); anything
else is a case-sensitive substring.
"""

import re
from typing import Dict, Iterable, List, Optional

from fslib.domain.errors import InvalidNeedleError
from fslib.domain.search_models import REGEX_MARKER, LiteralNeedle, Needle, RegexNeedle
from fslib.infra.fs import FileSystem

# -----------------------------------------------------------------------------
# REGEX FLAG CONSTANTS
# -----------------------------------------------------------------------------

_REGEX_FLAGS: Dict[str, int] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,  # contents are decoded text already
}

# -----------------------------------------------------------------------------
# NEEDLE PARSING
# -----------------------------------------------------------------------------

def parse_needle(raw: Optional[str]) -> Optional[Needle]:
    """
    Decide once whether a needle is a literal or a regular expression.

    Args:
        raw: Needle as supplied by the caller, or None.

    Returns:
        Optional[Needle]: Matching variant, None when no needle was given.

    Raises:
        InvalidNeedleError: If a delimited expression is malformed.
    """
    if raw is None:
        return None
    if not raw.startswith(REGEX_MARKER):
        return LiteralNeedle(raw)
    return RegexNeedle(_compile_delimited(raw))


def _compile_delimited(raw: str) -> re.Pattern:
    """Compile a '/pattern/flags' literal."""
    end = raw.rfind(REGEX_MARKER)
    if end <= 0:
        raise InvalidNeedleError(f"No ending delimiter '{REGEX_MARKER}' found in needle \"{raw}\"")

    body, modifiers = raw[1:end], raw[end + 1:]
    flags = 0
    for modifier in modifiers:
        if modifier not in _REGEX_FLAGS:
            raise InvalidNeedleError(f"Unknown modifier '{modifier}' in needle \"{raw}\"")
        flags |= _REGEX_FLAGS[modifier]

    try:
        return re.compile(body, flags)
    except re.error as e:
        raise InvalidNeedleError(f"Invalid regular expression needle \"{raw}\": {e}") from e


# -----------------------------------------------------------------------------
# CONTENT MATCHING
# -----------------------------------------------------------------------------

def read_text(fs: FileSystem, path: str) -> str:
    """
    Read a whole file as text.

    Undecodable byte sequences are replaced so binary files never abort
    a search.
    """
    return fs.read_file(path).decode("utf-8", errors="replace")


def filter_by_contents(fs: FileSystem, paths: Iterable[str], needle: Needle) -> List[str]:
    """
    Keep the files whose contents match the needle, preserving order.

    Paths that no longer resolve (dangling symlinks) have no contents and
    are dropped. Any other read failure propagates.

    Args:
        fs: Storage API used to read the files.
        paths: Candidate file paths.
        needle: Parsed needle.

    Returns:
        List[str]: Matching paths.
    """
    return [
        path for path in paths
        if fs.exists(path) and needle.matches(read_text(fs, path))
    ]
