"""
jcrush - JavaScript deduplicator.

Finds substrings that recur in a script, binds each to a short variable
and emits a smaller program that rebuilds and evaluates the original.
"""

from .config import CrushOptions, DEFAULT_OPTIONS, load_config, merge_options
from .engine import CrushResult, crush, crush_code
from .errors import ConfigLoadError, JCrushUserError
from .files import crush_file, crush_stream

__all__ = [
    "CrushOptions",
    "DEFAULT_OPTIONS",
    "load_config",
    "merge_options",
    "CrushResult",
    "crush",
    "crush_code",
    "crush_file",
    "crush_stream",
    "ConfigLoadError",
    "JCrushUserError",
]
