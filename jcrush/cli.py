from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_CFG_FILE, load_config, merge_options
from .engine import CrushResult
from .errors import JCrushUserError
from .files import crush_file, crush_stream
from .version import tool_version

_LOG = logging.getLogger("jcrush")


def _setup_logging(quiet: bool, debug: bool) -> None:
    if debug or os.environ.get("JCRUSH_DEBUG"):
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _flag(value: str) -> bool:
    """'1'/'0' style switch (also accepts true/false, yes/no)."""
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    try:
        return bool(int(v))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected 1 or 0, got {value!r}")


def _csv(value: str) -> list[str]:
    return [x.strip() for x in value.split(",") if x.strip()]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jcrush",
        description="JavaScript deduplicator: binds repeated substrings to short variables",
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("input", help="input .js file ('-' for stdin)")
    p.add_argument("output", help="output .js file ('-' for stdout)")
    p.add_argument("--config", metavar="FILE", help=f"YAML options file (default: ./{DEFAULT_CFG_FILE} if present)")

    g = p.add_argument_group("output")
    g.add_argument("--mode", choices=["concat", "template"], help="reconstruction style")
    g.add_argument("--eval", dest="use_eval", type=_flag, metavar="1|0", help="eval() (1) or new Function() (0)")
    g.add_argument("--let", dest="declare", type=_flag, metavar="1|0", help="declare bindings with let")
    g.add_argument("--semi", dest="semicolon", type=_flag, metavar="1|0", help="append a trailing semicolon")
    g.add_argument("--ascii", dest="ascii_safe", type=_flag, metavar="1|0", help="escape non-ASCII characters")
    g.add_argument("--wrap-prefix", help="custom text before the reconstruction expression")
    g.add_argument("--wrap-suffix", help="custom text after the reconstruction expression")

    g = p.add_argument_group("search")
    g.add_argument("--reps", dest="max_replacements", type=int, metavar="N", help="maximum replacements (0 = unlimited)")
    g.add_argument("--max-len", dest="max_len", type=int, metavar="N", help="maximum substring length")
    g.add_argument("--min-occ", dest="min_occurrences", type=int, metavar="N", help="minimum occurrences")
    g.add_argument("--reserved", type=_csv, metavar="A,B", help="identifiers never allocated")
    g.add_argument("--omit", type=_csv, metavar="S,T", help="substrings a candidate may not contain")
    g.add_argument("--break", dest="break_markers", type=_csv, metavar="S,T", help="extra break markers")

    g = p.add_argument_group("reporting")
    g.add_argument("--report", action="store_true", help="print a JSON report to stdout")
    g.add_argument("--quiet", action="store_true", help="only warnings and errors")
    g.add_argument("--debug", action="store_true", help="verbose diagnostics")
    return p


_OVERRIDE_KEYS = (
    "mode", "use_eval", "declare", "semicolon", "ascii_safe", "wrap_prefix", "wrap_suffix",
    "max_replacements", "max_len", "min_occurrences", "reserved", "omit", "break_markers",
)


def _overrides(ns: argparse.Namespace) -> Dict[str, Any]:
    return {k: getattr(ns, k) for k in _OVERRIDE_KEYS if getattr(ns, k, None) is not None}


def _run(ns: argparse.Namespace) -> CrushResult:
    cfg_path = Path(ns.config) if ns.config else Path.cwd() / DEFAULT_CFG_FILE
    if ns.config and not cfg_path.exists():
        raise JCrushUserError(f"Config file not found: {cfg_path}")
    options = merge_options(load_config(cfg_path), _overrides(ns))

    if ns.input == "-" or ns.output == "-":
        with ExitStack() as stack:
            src = sys.stdin if ns.input == "-" else stack.enter_context(
                open(ns.input, encoding="utf-8", newline="")
            )
            dst = sys.stdout if ns.output == "-" else stack.enter_context(
                open(ns.output, "w", encoding="utf-8", newline="")
            )
            return crush_stream(src, dst, options)
    return crush_file(ns.input, ns.output, options)


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.quiet, ns.debug)

    try:
        result = _run(ns)
    except JCrushUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"JCrush Error: {e}\n")
        return 2

    if ns.report:
        if ns.output == "-":
            sys.stdout.write("\n")
        sys.stdout.write(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
