"""
Quote policy for emitted JavaScript literals.

Working text is always kept raw; escaping happens exactly once, when a
value is rendered into one of the three literal notations:

- single quoted  ``'...'``  (escapes ``'``)
- double quoted  ``"..."``  (escapes ``"``)
- template       ``\\`...\\```  (escapes the backtick and ``${``)

Backslashes are escaped in every notation, line terminators in the two
quoted notations and ``\\r`` in templates (template literals normalize CR).
Unpaired surrogates are always written as ``\\uXXXX`` escapes.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from .types import Pattern
from .utils import byte_len

# ---------------------------------------------------------------------------
# Escape tables
# ---------------------------------------------------------------------------

_COMMON_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_SINGLE_RE = re.compile(r"[\\'\n\r\u2028\u2029]")
_DOUBLE_RE = re.compile(r'[\\"\n\r\u2028\u2029]')
_TEMPLATE_RE = re.compile(r"\\|`|\r|\$\{")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")
# Python strings can hold unpaired surrogates; UTF-8 cannot.
_LONE_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")

# Unescaped interpolation opener: ${ preceded by an even number of backslashes.
_UNESCAPED_OPEN_RE = re.compile(r"(?<!\\)(?:\\\\)*\$\{")
_ESCAPE_SEQ_RE = re.compile(r"\\([\\`$'\"])")

_TOKEN_TAIL_RE = re.compile(r"\{?[a-z0-9]*\}")
_TOKEN_HEAD_RE = re.compile(r"\$(?:\{[a-z0-9]*)?$")
_INTERPOLATION_RE = re.compile(r"\$\{([a-z][a-z0-9]*)\}")


def _sub_single(m: re.Match) -> str:
    ch = m.group(0)
    return "\\'" if ch == "'" else _COMMON_ESCAPES[ch]


def _sub_double(m: re.Match) -> str:
    ch = m.group(0)
    return '\\"' if ch == '"' else _COMMON_ESCAPES[ch]


def _sub_template(m: re.Match) -> str:
    tok = m.group(0)
    if tok == "`":
        return "\\`"
    if tok == "${":
        return "\\${"
    return _COMMON_ESCAPES[tok]


def _sub_non_ascii(m: re.Match) -> str:
    cp = ord(m.group(0))
    if cp <= 0xFFFF:
        return "\\u%04x" % cp
    # astral plane: UTF-16 surrogate pair
    cp -= 0x10000
    return "\\u%04x\\u%04x" % (0xD800 + (cp >> 10), 0xDC00 + (cp & 0x3FF))


def _finish(body: str, ascii_safe: bool) -> str:
    if ascii_safe:
        return _NON_ASCII_RE.sub(_sub_non_ascii, body)
    return _LONE_SURROGATE_RE.sub(_sub_non_ascii, body)


# ---------------------------------------------------------------------------
# Literal bodies (without delimiters)
# ---------------------------------------------------------------------------

def escape_single(value: str, ascii_safe: bool = False) -> str:
    body = _SINGLE_RE.sub(_sub_single, value)
    return _finish(body, ascii_safe)


def escape_double(value: str, ascii_safe: bool = False) -> str:
    body = _DOUBLE_RE.sub(_sub_double, value)
    return _finish(body, ascii_safe)


def escape_template(value: str, ascii_safe: bool = False) -> str:
    body = _TEMPLATE_RE.sub(_sub_template, value)
    return _finish(body, ascii_safe)


def unescape_template(value: str) -> str:
    """Drop one level of backslash escaping in front of \\ ` $ ' and "."""
    return _ESCAPE_SEQ_RE.sub(r"\1", value)


# ---------------------------------------------------------------------------
# Quote selection
# ---------------------------------------------------------------------------

def quote_candidates(value: str, ascii_safe: bool = False) -> List[str]:
    """All three encodings of *value*, in tie-break preference order."""
    return [
        "'" + escape_single(value, ascii_safe) + "'",
        '"' + escape_double(value, ascii_safe) + '"',
        "`" + escape_template(value, ascii_safe) + "`",
    ]


def quote(value: str, ascii_safe: bool = False) -> str:
    """
    Shortest literal encoding of *value*.

    Length is measured in UTF-8 bytes; ties go to the earlier notation
    (single, double, template).
    """
    best = None
    best_len = -1
    for encoded in quote_candidates(value, ascii_safe):
        n = byte_len(encoded)
        if best is None or n < best_len:
            best, best_len = encoded, n
    return best  # type: ignore[return-value]


def encoded_length(value: str, ascii_safe: bool = False) -> int:
    """Bytes taken by the body of ``quote(value)`` (delimiters excluded)."""
    return byte_len(quote(value, ascii_safe)) - 2


# ---------------------------------------------------------------------------
# Interpolation (template mode)
# ---------------------------------------------------------------------------

def has_unescaped_interpolation(text: str) -> bool:
    """True if raw *text* contains a ``${`` that is not backslash-escaped."""
    return _UNESCAPED_OPEN_RE.search(text) is not None


def interpolate(identifier: str) -> str:
    return "${" + identifier + "}"


def render_template_body(pieces: Iterable, ascii_safe: bool = False) -> str:
    """Template literal body: literal pieces escaped, references interpolated."""
    out = []
    for seg in pieces:
        out.append(escape_template(seg.value, ascii_safe) if seg.is_literal else interpolate(seg.value))
    return "".join(out)


def template_literal(pattern: Pattern, ascii_safe: bool = False) -> str:
    return "`" + render_template_body(pattern, ascii_safe) + "`"


def fix_interpolation_boundary(value: str) -> str:
    """
    Trim partial ``${id}`` tokens from both ends of a candidate.

    A candidate cut out of the template-mode working text may start inside
    an interpolation (``a}rest``, ``{a}rest``) or stop inside one
    (``rest$``, ``rest${a``). Such fragments are removed; complete
    ``${id}`` spans are kept. Over-trimming a genuine ``}`` or ``$`` only
    shortens the candidate, it never desynchronizes the template.
    """
    first_open = value.find("${")
    m = _TOKEN_TAIL_RE.match(value)
    if m and (first_open == -1 or m.end() <= first_open):
        value = value[m.end():]
    m = _TOKEN_HEAD_RE.search(value)
    if m:
        value = value[:m.start()]
    return value


def split_interpolations(value: str, known: Iterable[str]) -> List[tuple]:
    """
    Split *value* at complete ``${id}`` tokens.

    Returns ``(text, identifier)`` pairs in order; ``identifier`` is None for
    plain text. Tokens naming unknown identifiers stay text.
    """
    known = set(known)
    parts: List[tuple] = []
    pos = 0
    for m in _INTERPOLATION_RE.finditer(value):
        if m.group(1) not in known:
            continue
        if m.start() > pos:
            parts.append((value[pos:m.start()], None))
        parts.append((m.group(0), m.group(1)))
        pos = m.end()
    if pos < len(value):
        parts.append((value[pos:], None))
    return parts


__all__ = [
    "escape_single",
    "escape_double",
    "escape_template",
    "unescape_template",
    "quote_candidates",
    "quote",
    "encoded_length",
    "has_unescaped_interpolation",
    "interpolate",
    "render_template_body",
    "template_literal",
    "fix_interpolation_boundary",
    "split_interpolations",
]
