"""
Short identifier allocation.

Identifiers are drawn from the sequence a, b, ..., z, a0, a1, ..., a9, aa, ...,
zz, a00, ... (base-36 over ``[a-z][a-z0-9]*``, first character always a letter).
Names the emitted JavaScript cannot bind safely are skipped.
"""

from __future__ import annotations

import re
from typing import AbstractSet, FrozenSet, Iterable, Optional

_IDENT_RE = re.compile(r"[a-z][a-z0-9]*")

_MIN_LETTER = "a"
_MIN_DIGIT = "0"
_MAX_DIGIT = "z"

# Keywords and future reserved words (sloppy and strict mode), plus literals.
_JS_KEYWORDS = frozenset((
    "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "enum", "export",
    "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null",
    "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var",
    "void", "while", "with", "yield",
))

# Names that parse as identifiers but cannot be assigned, or whose
# assignment has side effects in a browser or Node.js global scope.
_JS_UNSAFE_GLOBALS = frozenset((
    "arguments", "eval", "undefined", "NaN", "Infinity",
    "top", "self", "window", "parent", "frames", "opener", "closed",
    "length", "location", "document", "history", "name", "status",
    "event", "global", "module", "exports", "require", "process",
))

RESERVED_IDENTIFIERS: FrozenSet[str] = _JS_KEYWORDS | _JS_UNSAFE_GLOBALS


def is_usable_identifier(name: str, reserved: AbstractSet[str] = frozenset()) -> bool:
    """True if *name* can be emitted as a bare binding name."""
    return (
        _IDENT_RE.fullmatch(name) is not None
        and name not in RESERVED_IDENTIFIERS
        and name not in reserved
    )


def _increment(name: str) -> str:
    pos = len(name) - 1
    zeros = 0
    # carry over trailing maximal digits
    while pos >= 0 and name[pos] == _MAX_DIGIT:
        zeros += 1
        pos -= 1
    if pos < 0:
        return _MIN_LETTER + _MIN_DIGIT * len(name)
    ch = name[pos]
    bumped = "a" if ch == "9" else chr(ord(ch) + 1)
    return name[:pos] + bumped + _MIN_DIGIT * zeros


def next_identifier(current: str, reserved: AbstractSet[str] = frozenset()) -> str:
    """
    Next identifier after *current* in allocation order.

    Candidates that are JavaScript keywords, unsafe globals or members of
    *reserved* are skipped. Pure function: same input, same output.
    """
    name = _increment(current)
    while not is_usable_identifier(name, reserved):
        name = _increment(name)
    return name


def first_identifier(reserved: AbstractSet[str] = frozenset()) -> str:
    return _MIN_LETTER if is_usable_identifier(_MIN_LETTER, reserved) else next_identifier(_MIN_LETTER, reserved)


class IdentifierAllocator:
    """Per-run cursor over the identifier sequence."""

    def __init__(self, reserved: Optional[Iterable[str]] = None):
        self.reserved: FrozenSet[str] = frozenset(reserved or ())
        self.current = first_identifier(self.reserved)

    def peek(self) -> str:
        """Identifier the next allocation will return."""
        return self.current

    def allocate(self) -> str:
        name = self.current
        self.current = next_identifier(name, self.reserved)
        return name


__all__ = [
    "RESERVED_IDENTIFIERS",
    "is_usable_identifier",
    "next_identifier",
    "first_identifier",
    "IdentifierAllocator",
]
