from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. The shared directory tree used by the walking and searching tests.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def dir_tree(tmp_path: Path) -> Path:
    """
    Create the reference directory structure.

    Layout:
        dir1/dir11/dir111/deepFile  ("contraception")
        dir2/dir22/
        dir3/
        file                        ("someCONTEnt")

    Returns:
        Path: Root of the structure.
    """
    root = tmp_path / "tree"
    deep = root / "dir1" / "dir11" / "dir111"
    deep.mkdir(parents=True)
    (root / "dir2" / "dir22").mkdir(parents=True)
    (root / "dir3").mkdir()

    (root / "file").write_text("someCONTEnt", encoding="utf-8")
    (deep / "deepFile").write_text("contraception", encoding="utf-8")

    return root


@pytest.fixture
def relative_to(dir_tree: Path) -> Callable[[Iterable[str]], List[str]]:
    """Return a helper turning found paths into sorted '/'-separated relative paths."""

    def _relative(paths: Iterable[str]) -> List[str]:
        return sorted(
            os.path.relpath(p, str(dir_tree)).replace(os.sep, "/")
            for p in paths
        )

    return _relative
