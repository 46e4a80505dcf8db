"""
Output assembly.

Renders the final segment sequence and the binding table as JavaScript:

    [let ]a='...',b="...";eval('...'+a+'...'+b)[;]

or, in template mode,

    [let ]a=`...`,b=`...${a}...`;eval(`...${a}...${b}`)[;]
"""

from __future__ import annotations

from typing import Iterable, Mapping

from .config import CrushOptions
from .quoting import quote, template_literal
from .types import Pattern, Segment

EVAL_WRAP = ("eval(", ")")
FUNCTION_WRAP = ("(new Function(", "))()")


def wrapper_for(options: CrushOptions) -> tuple:
    """Prefix/suffix of the dynamic-execution call."""
    if options.wrap_prefix is not None or options.wrap_suffix is not None:
        return options.wrap_prefix or "", options.wrap_suffix or ""
    return EVAL_WRAP if options.use_eval else FUNCTION_WRAP


def render_value(pattern: Pattern, options: CrushOptions) -> str:
    """Literal for a bound value; values interpolating other bindings need a template."""
    if any(s.is_reference for s in pattern):
        return template_literal(pattern, options.ascii_safe)
    return quote("".join(s.value for s in pattern), options.ascii_safe)


def render_bindings(table: Mapping[str, Pattern], options: CrushOptions) -> str:
    return ",".join(f"{ident}={render_value(value, options)}" for ident, value in table.items())


def render_concat(segments: Iterable[Segment], options: CrushOptions) -> str:
    parts = [quote(s.value, options.ascii_safe) if s.is_literal else s.value for s in segments]
    return "+".join(parts) if parts else "''"


def render_template(segments: Iterable[Segment], options: CrushOptions) -> str:
    return template_literal(tuple(segments), options.ascii_safe)


def assemble(segments: Iterable[Segment], table: Mapping[str, Pattern], options: CrushOptions) -> str:
    """Complete program text: bindings, then the wrapped reconstruction expression."""
    if options.mode == "template":
        expr = render_template(segments, options)
    else:
        expr = render_concat(segments, options)
    prefix, suffix = wrapper_for(options)
    out = render_bindings(table, options) + ";" + prefix + expr + suffix
    if options.declare:
        out = "let " + out
    if options.semicolon:
        out += ";"
    return out


__all__ = [
    "EVAL_WRAP",
    "FUNCTION_WRAP",
    "wrapper_for",
    "render_value",
    "render_bindings",
    "render_concat",
    "render_template",
    "assemble",
]
