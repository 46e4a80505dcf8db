"""
Minimal evaluator for jcrush output.

Understands exactly the subset jcrush emits:

    [let ]id=LITERAL(,id=LITERAL)*;WRAP(OPERAND(+OPERAND)*)[;]

where LITERAL is a '...', "..." or `...` literal (templates may
interpolate earlier bindings) and WRAP is eval(...) or (new Function(...))().
Returns the program text the wrapper would execute.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

_IDENT_RE = re.compile(r"[a-z][a-z0-9]*")
_QUOTES = "'\"`"
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_WRAPPERS = (("eval(", ")"), ("(new Function(", "))()"))


class JsSyntaxError(ValueError):
    pass


def read_literal(src: str, i: int, env: Dict[str, str]) -> Tuple[str, int]:
    """Decode the literal starting at src[i]; return (value, index after it)."""
    q = src[i]
    if q not in _QUOTES:
        raise JsSyntaxError(f"literal expected at {i}: {src[i:i + 20]!r}")
    out = []
    i += 1
    while True:
        if i >= len(src):
            raise JsSyntaxError("unterminated literal")
        ch = src[i]
        if ch == "\\":
            nxt = src[i + 1]
            if nxt == "u":
                out.append(chr(int(src[i + 2:i + 6], 16)))
                i += 6
                continue
            out.append(_SIMPLE_ESCAPES.get(nxt, nxt))
            i += 2
        elif q == "`" and src.startswith("${", i):
            end = src.index("}", i)
            name = src[i + 2:end]
            if name not in env:
                raise JsSyntaxError(f"unbound identifier {name!r}")
            out.append(env[name])
            i = end + 1
        elif ch == q:
            i += 1
            break
        elif q != "`" and ch in "\n\r":
            raise JsSyntaxError("line break inside quoted literal")
        else:
            out.append(ch)
            i += 1
    value = "".join(out)
    # join UTF-16 surrogate pairs written as two \u escapes
    return value.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass"), i


def _expect(src: str, i: int, token: str) -> int:
    if not src.startswith(token, i):
        raise JsSyntaxError(f"{token!r} expected at {i}: {src[i:i + 20]!r}")
    return i + len(token)


def reconstruct(program: str) -> str:
    """Text that executing *program* would evaluate."""
    env: Dict[str, str] = {}
    i = 4 if program.startswith("let ") else 0

    while True:
        m = _IDENT_RE.match(program, i)
        if not m:
            raise JsSyntaxError(f"identifier expected at {i}")
        i = _expect(program, m.end(), "=")
        env[m.group(0)], i = read_literal(program, i, env)
        if program.startswith(",", i):
            i += 1
            continue
        i = _expect(program, i, ";")
        break

    for prefix, suffix in _WRAPPERS:
        if program.startswith(prefix, i):
            i += len(prefix)
            break
    else:
        raise JsSyntaxError(f"wrapper expected at {i}")

    parts = []
    while True:
        if program[i] in _QUOTES:
            value, i = read_literal(program, i, env)
        else:
            m = _IDENT_RE.match(program, i)
            if not m or m.group(0) not in env:
                raise JsSyntaxError(f"operand expected at {i}")
            value, i = env[m.group(0)], m.end()
        parts.append(value)
        if program.startswith("+", i):
            i += 1
            continue
        break

    i = _expect(program, i, suffix)
    if program.startswith(";", i):
        i += 1
    if i != len(program):
        raise JsSyntaxError(f"trailing text at {i}: {program[i:i + 20]!r}")
    return "".join(parts)
