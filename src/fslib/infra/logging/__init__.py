from __future__ import annotations

from .config import LoggingConfig
from .core import configure_logging, get_recent_logs, shutdown_logging
from .handlers import RotatingLoggerHandler

__all__ = [
    "LoggingConfig",
    "RotatingLoggerHandler",
    "configure_logging",
    "get_recent_logs",
    "shutdown_logging",
]
