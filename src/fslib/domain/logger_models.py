from __future__ import annotations

"""
Rotating Logger Configuration Models.

Defines the layered configuration used by the rotating logger. Every field
is optional so that built-in defaults, instance defaults and per-call
overrides can be resolved field by field.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Union

from fslib.domain.errors import ConfigurationError

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

DEFAULT_MAX_SIZE: int = 1048576  # 1 MB

_INT_FIELDS = ("max_size", "rotation", "file_mode")


# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable set of rotating logger parameters.

    A field set to None is considered unset and yields to the layer below
    it when configurations are merged.

    Attributes:
        path: Target log file path.
        max_size: Size in bytes above which the file is rotated.
        rotation: Number of rotated generations to keep (0 keeps none).
        file_mode: Permission bits applied after each write, skipped if None.
    """
    path: Optional[str] = None
    max_size: Optional[int] = None
    rotation: Optional[int] = None
    file_mode: Optional[int] = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "LoggerConfig":
        """
        Build a configuration from a plain mapping of option names.

        Args:
            options: Mapping using the dataclass field names as keys.

        Returns:
            LoggerConfig: The validated configuration.

        Raises:
            ConfigurationError: On unknown keys, wrong types or negative sizes.
        """
        known = {f.name for f in fields(cls)}
        for key in options:
            if key not in known:
                raise ConfigurationError(f"Unknown option '{key}'")

        path = options.get("path")
        if path is not None and not isinstance(path, str):
            raise ConfigurationError(f"Option 'path' must be a string, got {type(path).__name__}")

        for name in _INT_FIELDS:
            value = options.get(name)
            if value is None:
                continue
            # bool is an int subclass but never a meaningful size
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"Option '{name}' must be an integer, got {type(value).__name__}"
                )
            if name != "file_mode" and value < 0:
                raise ConfigurationError(f"Option '{name}' must not be negative")

        return cls(**{k: options.get(k) for k in known})

    def merged_over(self, base: "LoggerConfig") -> "LoggerConfig":
        """
        Layer this configuration on top of another one.

        Args:
            base: Lower priority configuration.

        Returns:
            LoggerConfig: Fields set here, falling back to those of base.
        """
        overrides = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(base, **overrides)


BUILTIN_DEFAULTS = LoggerConfig(
    path=None,
    max_size=DEFAULT_MAX_SIZE,
    rotation=0,
    file_mode=None,
)

LoggerOptions = Union[LoggerConfig, Mapping[str, Any], None]


def coerce_config(options: LoggerOptions) -> LoggerConfig:
    """
    Normalize any accepted options value into a LoggerConfig.

    Args:
        options: A LoggerConfig, an option mapping or None.

    Returns:
        LoggerConfig: Equivalent configuration (all fields unset for None).
    """
    if options is None:
        return LoggerConfig()
    if isinstance(options, LoggerConfig):
        return options
    return LoggerConfig.from_mapping(options)
