from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Provides the file handler backed by the rotating logger service and the
tagging mechanism used to tell our own handlers apart from external or
library-injected ones.
"""

import logging
import os
import sys
from typing import Optional

from fslib.core.services.rotating_logger import RotatingLogger
from fslib.domain.logger_models import LoggerConfig

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_fslib_handler"


# ==============================================================================
# FILE HANDLER
# ==============================================================================

class _SkipWriterRecords(logging.Filter):
    """Drop records emitted by the rotating logger service itself."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name != RotatingLogger.__module__


class RotatingLoggerHandler(logging.Handler):
    """
    Write formatted records through a RotatingLogger.

    The file is rotated before a record is appended whenever it already
    exceeds max_bytes, so a generation may end slightly above the limit.
    """

    def __init__(
            self,
            log_file: str,
            max_bytes: int,
            backup_count: int,
            file_mode: Optional[int] = None,
            level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self.log_file = log_file
        # Rotation records would otherwise be written through this very handler
        self.addFilter(_SkipWriterRecords())
        self._writer = RotatingLogger(LoggerConfig(
            path=log_file,
            max_size=int(max_bytes),
            rotation=int(backup_count),
            file_mode=file_mode,
        ))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._writer.log(self.format(record) + "\n")
        except Exception:
            self.handleError(record)


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as an internally-managed handler.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """
    Verify if a handler was initialized by this diagnostic module.

    Args:
        handler: The handler to inspect.

    Returns:
        bool: True if the handler carries our internal tag.
    """
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
        file_mode: Optional[int] = None,
) -> Optional[RotatingLoggerHandler]:
    """
    Initialize a RotatingLoggerHandler, creating its directory if needed.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        max_bytes: Rotation threshold in bytes.
        backup_count: Number of rotated generations to keep.
        file_mode: Optional permission bits for the log file.

    Returns:
        Optional[RotatingLoggerHandler]: Configured handler or None if the
        directory cannot be created.
    """
    try:
        _ensure_parent_dir(log_file)
    except OSError as e:
        sys.stderr.write(f"WARNING: Failed to initialize file logging at '{log_file}': {e}\n")
        return None

    fh = RotatingLoggerHandler(log_file, max_bytes, backup_count, file_mode)
    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy for a target file.

    Args:
        path: Path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)
