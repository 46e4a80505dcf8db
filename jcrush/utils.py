"""Shared helpers (byte accounting, text I/O)."""

from __future__ import annotations

from pathlib import Path


def byte_len(text: str) -> int:
    """UTF-8 length of *text* in bytes (an unpaired surrogate counts as three)."""
    return len(text.encode("utf-8", "surrogatepass"))


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

def read_file_text(path: Path) -> str:
    """Read the whole file as UTF-8. Newlines are kept verbatim."""
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def write_file_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
