from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, NewType, Tuple

# ---- Aliases for clarity ----
OutputMode = Literal["concat", "template"]
SkipScope = Literal["run", "iteration"]
Identifier = NewType("Identifier", str)  # "a", "b", ..., "a0", ...


class SegmentKind(str, Enum):
    LITERAL = "literal"
    REFERENCE = "reference"


# ---- Segments ----

@dataclass(frozen=True)
class Segment:
    """
    Typed span of the working program.

    A LITERAL segment carries raw program text, a REFERENCE segment carries
    the identifier bound to an accepted replacement.
    """
    value: str
    kind: SegmentKind = SegmentKind.LITERAL

    @property
    def is_literal(self) -> bool:
        return self.kind is SegmentKind.LITERAL

    @property
    def is_reference(self) -> bool:
        return self.kind is SegmentKind.REFERENCE

    @classmethod
    def literal(cls, value: str) -> Segment:
        return cls(value, SegmentKind.LITERAL)

    @classmethod
    def reference(cls, identifier: str) -> Segment:
        return cls(identifier, SegmentKind.REFERENCE)


# A pattern is a short segment sequence searched for inside the arena.
# In concatenation mode it is always a single literal piece.
Pattern = Tuple[Segment, ...]


@dataclass
class Rewrite:
    """
    Result of one split pass over the arena.

    segments[start:start + len(inserted)] replaced the former
    segments[start:start + len(removed)]; keeping both sides makes undo trivial.
    """
    start: int
    removed: List[Segment] = field(default_factory=list)
    inserted: List[Segment] = field(default_factory=list)
    count: int = 0  # number of replaced occurrences


# ---- Search capability ----

@dataclass(frozen=True)
class Candidate:
    substring: str
    count: int


@dataclass(frozen=True)
class SearchConstraints:
    min_len: int
    max_len: int = 40
    min_occurrences: int = 2
    max_results: int = 50
    penalty: int = 0
    omit: Tuple[str, ...] = ()
    words: bool = False
    trim: bool = False
    clean: bool = False
    break_markers: Tuple[str, ...] = ()


__all__ = [
    "OutputMode",
    "SkipScope",
    "Identifier",
    "SegmentKind",
    "Segment",
    "Pattern",
    "Rewrite",
    "Candidate",
    "SearchConstraints",
]
