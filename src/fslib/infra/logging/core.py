from __future__ import annotations

"""
Diagnostics Logging Lifecycle.

Installs a single QueueHandler on the root logger and drains it from a
QueueListener thread into the console and the rotating file sink. Log
file rotation therefore happens on the listener thread, never inside a
walk or a search. A running listener stored on the root logger marks the
subsystem as configured.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from fslib.infra.logging.config import _LEVEL_MAP, LoggingConfig
from fslib.infra.logging.handlers import (
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

_QUEUE_LISTENER_ATTR: str = "_fslib_queue_listener"

_EMERGENCY_FMT = "LOGGING FALLBACK | %(levelname)s | %(message)s"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route root logger records through a queue to the configured sinks.

    A second call is a no-op while a listener is running, unless force is
    set. If the sinks cannot be built (unwritable log directory, bad format
    string), a plain stderr handler is installed instead and a warning is
    logged through it.

    Args:
        cfg: Sinks, level and formats to install.
        force: Tear down the running listener and rebuild everything.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if _current_listener(root) is not None and not force:
        return root

    _teardown(root)
    try:
        level = _parse_level(cfg.level)
        root.setLevel(level)
        sinks = _build_sinks(cfg, level)
        if sinks:
            _start_listener(root, sinks)
    except Exception:
        _teardown(root)
        _install_emergency_console(root)
    return root


def shutdown_logging() -> None:
    """Drain the queue, stop the listener and detach every handler we installed."""
    _teardown(logging.getLogger())


def get_recent_logs(log_path: str, n_lines: int = 100) -> str:
    """
    Return the last lines of a log file.

    Args:
        log_path: Log file to read.
        n_lines: How many trailing lines to keep.

    Returns:
        str: The tail, or "Log file not found." when there is no such file.
    """
    if not os.path.exists(log_path):
        return "Log file not found."

    # A rotation may cut a multi-byte character in half
    with open(log_path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.readlines()
    return "".join(lines[-n_lines:])


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Map a level name such as " warn " to its logging constant, INFO if unknown."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def _build_sinks(cfg: LoggingConfig, level: int) -> List[logging.Handler]:
    """Create the handlers the listener will feed."""
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        _tag_handler(console)
        sinks.append(console)

    if cfg.log_file:
        file_sink = _create_rotating_file_handler(
            cfg.log_file,
            level,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
            cfg.file_mode,
        )
        if file_sink:
            sinks.append(file_sink)

    return sinks


def _start_listener(root: logging.Logger, sinks: List[logging.Handler]) -> None:
    """Attach the queue handler to root and start draining it into sinks."""
    records: queue.Queue = queue.Queue(-1)

    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    atexit.register(_safe_stop_listener, listener)

    entry = QueueHandler(records)
    _tag_handler(entry)
    root.addHandler(entry)


def _install_emergency_console(root: logging.Logger) -> None:
    root.setLevel(logging.INFO)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(_EMERGENCY_FMT))
    _tag_handler(console)
    root.addHandler(console)
    root.warning("Diagnostics logging setup failed, writing to stderr only")


def _current_listener(root: logging.Logger) -> Optional[QueueListener]:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    return listener if isinstance(listener, QueueListener) else None


def _teardown(root: logging.Logger) -> None:
    """Stop the listener (closing its sinks) and remove our root handlers."""
    listener = _current_listener(root)
    if listener is not None:
        _safe_stop_listener(listener)
        for sink in listener.handlers:
            sink.close()
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for handler in list(root.handlers):
        if _is_our_handler(handler):
            root.removeHandler(handler)
            handler.close()


def _safe_stop_listener(listener: QueueListener) -> None:
    """Stop a listener unless its thread is already gone."""
    # QueueListener.stop() fails once the thread has been joined
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
