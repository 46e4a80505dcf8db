"""
Repeated-substring search capability.

The engine talks to any callable matching ``SearchFn``; ``find_repeats`` is
the built-in implementation. A search function must be deterministic for
identical inputs.
"""

from __future__ import annotations

from typing import Callable, Sequence

from ..types import Candidate, SearchConstraints
from .repeats import find_repeats, split_chunks

SearchFn = Callable[[str, SearchConstraints], Sequence[Candidate]]

__all__ = ["SearchFn", "find_repeats", "split_chunks"]
