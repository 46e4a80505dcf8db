"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from JCrushUserError.

Programming errors and bugs should NOT inherit from JCrushUserError —
they will propagate with full tracebacks.
"""

from __future__ import annotations


class JCrushUserError(Exception):
    """
    Base class for all user-facing errors in jcrush.

    These errors indicate problems that the user can fix:
    configuration issues, unreadable input files, etc.
    """
    pass


class ConfigLoadError(JCrushUserError):
    """Configuration could not be loaded or validated (message names the field path)."""
    pass


__all__ = ["JCrushUserError", "ConfigLoadError"]
