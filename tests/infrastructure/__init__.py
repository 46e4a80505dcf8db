"""
Shared test infrastructure for jcrush.

Modules:
- js_runtime: evaluates the binding / literal / concatenation syntax that
  jcrush emits, so round trips can be checked without a JavaScript engine
- file_utils: helpers for creating files in tests
"""

from .file_utils import write
from .js_runtime import JsSyntaxError, read_literal, reconstruct

__all__ = ["write", "JsSyntaxError", "read_literal", "reconstruct"]
