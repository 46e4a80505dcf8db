from __future__ import annotations

from pathlib import Path


def write(p: Path, text: str) -> Path:
    """Write UTF-8 text verbatim, creating parent directories as needed."""
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    return p
