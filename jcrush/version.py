from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Installed package version.
    Independent of other modules (avoids import cycles).
    """
    try:
        return metadata.version("jcrush")
    except metadata.PackageNotFoundError:
        return "0.0.0"

__all__ = ["tool_version"]
