from __future__ import annotations

"""
Rotating File Logger Service.

Appends raw messages to a log file and rotates aged generations once the
live file grows past a size threshold. Generation '.1' always holds the
most recently rotated content, '.N' the oldest one kept.
"""

import logging
import os
from typing import Optional, Union

from fslib.domain.errors import ConfigurationError
from fslib.domain.logger_models import (
    BUILTIN_DEFAULTS,
    LoggerConfig,
    LoggerOptions,
    coerce_config,
)
from fslib.infra.fs import FileSystem, get_default_fs

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

class RotatingLogger:
    """
    Append-only logger supporting size based file rotation.

    Example:
        rl = RotatingLogger({"path": "/var/log/app.log", "rotation": 3})
        rl.log("started\\n")

    No lock is taken around the size check, rotation and append sequence:
    at most one writer per target path is supported. Concurrent writers on
    the same path may interleave rotations and lose each other's data.
    """

    def __init__(self, options: LoggerOptions = None, fs: Optional[FileSystem] = None) -> None:
        self._fs = fs or get_default_fs()
        self._defaults = BUILTIN_DEFAULTS
        self.configure(options)

    @property
    def defaults(self) -> LoggerConfig:
        """Currently stored instance defaults."""
        return self._defaults

    def configure(self, options: LoggerOptions, override: bool = False) -> None:
        """
        Store new instance defaults.

        Args:
            options: Option set to store (LoggerConfig or mapping).
            override: If True, options replace the stored defaults entirely and
                      unset fields stay unset. Otherwise they are merged on top
                      of the built-in defaults.

        Raises:
            ConfigurationError: If an option mapping is malformed.
        """
        config = coerce_config(options)
        self._defaults = config if override else config.merged_over(BUILTIN_DEFAULTS)

    def log(
            self,
            message: Union[str, bytes],
            path: Optional[str] = None,
            options: LoggerOptions = None,
    ) -> None:
        """
        Rotate the target file if needed, then append the message.

        Precedence: per-call options > path argument > instance defaults.

        Args:
            message: Raw text (written as UTF-8) or bytes, appended verbatim.
            path: Target file, overrides the default path.
            options: Per-call overrides, not persisted.

        Raises:
            ConfigurationError: If no path is set or its directory does not resolve.
            OSError: On any underlying storage failure (including chmod).
        """
        config = self._resolve(path, options)

        target = self._target_path(config.path)

        max_size = config.max_size if config.max_size is not None else BUILTIN_DEFAULTS.max_size
        rotation = config.rotation if config.rotation is not None else BUILTIN_DEFAULTS.rotation

        if self._fs.exists(target) and self._fs.file_size(target) > max_size:
            self._rotate(target, rotation)

        data = message.encode("utf-8") if isinstance(message, str) else message
        self._fs.append_file(target, data)

        if config.file_mode is not None:
            self._fs.set_permissions(target, config.file_mode)

    # ==========================================================================
    # PRIVATE HELPERS
    # ==========================================================================

    def _resolve(self, path: Optional[str], options: LoggerOptions) -> LoggerConfig:
        """Layer call options, the path argument and stored defaults."""
        layered = self._defaults
        if path is not None:
            layered = LoggerConfig(path=path).merged_over(layered)
        return coerce_config(options).merged_over(layered)

    def _target_path(self, path: Optional[str]) -> str:
        """Rebuild the path from its canonical parent and original base name."""
        if not path:
            raise ConfigurationError("Missing path")

        parent = self._fs.resolve_canonical_path(os.path.dirname(path) or ".")
        if parent is None or not self._fs.is_directory(parent):
            raise ConfigurationError(f"Invalid directory \"{path}\"")

        return os.path.join(parent, os.path.basename(path))

    def _rotate(self, path: str, rotation: int) -> None:
        """Shift generations up by one and drop the live file."""
        logger.debug(f"Rotating '{path}' keeping {rotation} generation(s)")

        for i in range(rotation, 0, -1):
            dest = f"{path}.{i}"
            # First rotations find no destination yet
            if self._fs.exists(dest):
                self._fs.delete_file(dest)

            source = f"{path}.{i - 1}" if i > 1 else path
            if self._fs.exists(source):
                self._fs.rename_entry(source, dest)

        if self._fs.exists(path):
            self._fs.delete_file(path)
