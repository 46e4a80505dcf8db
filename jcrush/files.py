"""File and stream adapters around the core transform."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

from .config import CrushOptions
from .engine import CrushResult, crush
from .errors import JCrushUserError
from .utils import read_file_text, write_file_text

logger = logging.getLogger(__name__)


def crush_file(
    input_path: Path | str,
    output_path: Path | str,
    options: Optional[CrushOptions] = None,
) -> CrushResult:
    """Crush a UTF-8 JavaScript file into *output_path*."""
    src = Path(input_path)
    dst = Path(output_path)
    try:
        source = read_file_text(src)
    except (OSError, UnicodeDecodeError) as e:
        raise JCrushUserError(f"Cannot read {src}: {e}") from e

    result = crush(source, options)

    try:
        write_file_text(dst, result.code)
    except OSError as e:
        raise JCrushUserError(f"Cannot write {dst}: {e}") from e
    logger.info("JCrush processed: %s", dst)
    return result


def crush_stream(src: TextIO, dst: TextIO, options: Optional[CrushOptions] = None) -> CrushResult:
    """Read all of *src*, write the crushed program to *dst*."""
    result = crush(src.read(), options)
    dst.write(result.code)
    return result


__all__ = ["crush_file", "crush_stream"]
