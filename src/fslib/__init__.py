from __future__ import annotations

"""
File system related library.

Provides an append-only logger rotating its files by size and a recursive
directory toolkit (walk, removal, pattern and content search).
"""

from fslib.core.services.rotating_logger import RotatingLogger
from fslib.core.services.searcher import search
from fslib.core.services.walker import remove_dir, walk_dir
from fslib.domain.errors import (
    ConfigurationError,
    FsLibError,
    InvalidNeedleError,
    InvalidPathError,
)
from fslib.domain.logger_models import DEFAULT_MAX_SIZE, LoggerConfig
from fslib.domain.search_models import DirEntry, GlobFlag, SearchCollector
from fslib.infra.fs import FileSystem

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DEFAULT_MAX_SIZE",
    "DirEntry",
    "FileSystem",
    "FsLibError",
    "GlobFlag",
    "InvalidNeedleError",
    "InvalidPathError",
    "LoggerConfig",
    "RotatingLogger",
    "SearchCollector",
    "remove_dir",
    "search",
    "walk_dir",
]
