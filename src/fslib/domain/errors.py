from __future__ import annotations

"""
Library Error Hierarchy.

Defines the exceptions raised by the rotating logger and the directory
toolkit. Underlying storage failures (OSError family) are never wrapped
and reach the caller unmodified.
"""

# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class FsLibError(Exception):
    """Base class for every error raised by fslib itself."""


# -----------------------------------------------------------------------------
# DOMAIN ERRORS
# -----------------------------------------------------------------------------

class ConfigurationError(FsLibError, ValueError):
    """
    Raised when the effective logger configuration is unusable.

    Covers a missing target path, a parent directory that does not resolve,
    and malformed option mappings.
    """


class InvalidPathError(FsLibError, ValueError):
    """Raised when a walk root does not resolve to an existing directory."""


class InvalidNeedleError(FsLibError, ValueError):
    """Raised when a regular expression needle cannot be compiled."""
