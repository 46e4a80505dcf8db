"""
Segment arena.

The in-progress program is an ordered list of segments addressed by index.
A split pass finds every non-overlapping occurrence of a pattern and swaps
the affected index range for new segments; the returned ``Rewrite`` records
both sides of that range so the pass can be undone exactly.

Matching works on an encoded view of the arena in which every reference is
a single private-use character that never occurs in the source. A pattern
therefore can never match half of a reference, and a pattern made of
several pieces (text, reference, text) is matched like a plain substring.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .types import Pattern, Rewrite, Segment, SegmentKind

# Private use areas: BMP first, then the supplementary planes.
_SENTINEL_RANGES = ((0xE000, 0xF8FF), (0xF0000, 0xFFFFD), (0x100000, 0x10FFFD))


def _sentinel_codepoints():
    for lo, hi in _SENTINEL_RANGES:
        yield from range(lo, hi + 1)


class SegmentArena:
    """Ordered Literal/Reference segments of the working program."""

    def __init__(self, text: str):
        self.segments: List[Segment] = [Segment.literal(text)] if text else []
        self._taken: Set[str] = set(text)
        self._codepoints = _sentinel_codepoints()
        self._sentinel_of: Dict[str, str] = {}
        self._identifier_of: Dict[str, str] = {}
        self._split_re: Optional[re.Pattern] = None
        self._encoded: Optional[str] = None

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    @property
    def literals(self) -> List[str]:
        return [s.value for s in self.segments if s.is_literal]

    def join_literals(self, separator: str) -> str:
        """Literal spans joined by *separator* (concatenation-mode search text)."""
        return separator.join(self.literals)

    def render(self, reference_fmt: str = "${%s}") -> str:
        """Literal spans raw, references formatted with *reference_fmt*."""
        return "".join(s.value if s.is_literal else reference_fmt % s.value for s in self.segments)

    # ------------------------------------------------------------------ #
    # Encoding
    # ------------------------------------------------------------------ #

    def _sentinel(self, identifier: str) -> str:
        ch = self._sentinel_of.get(identifier)
        if ch is None:
            for cp in self._codepoints:
                ch = chr(cp)
                if ch not in self._taken:
                    break
            else:  # pragma: no cover - 137k identifiers
                raise RuntimeError("sentinel characters exhausted")
            self._taken.add(ch)
            self._sentinel_of[identifier] = ch
            self._identifier_of[ch] = identifier
            self._split_re = None
        return ch

    def _encode(self, segments: Iterable[Segment]) -> str:
        return "".join(s.value if s.is_literal else self._sentinel(s.value) for s in segments)

    def _encoded_view(self) -> str:
        if self._encoded is None:
            self._encoded = self._encode(self.segments)
        return self._encoded

    def _decode(self, encoded: str) -> List[Segment]:
        if not self._identifier_of:
            return [Segment.literal(encoded)] if encoded else []
        if self._split_re is None:
            self._split_re = re.compile("([" + "".join(map(re.escape, self._identifier_of)) + "])")
        out: List[Segment] = []
        for i, part in enumerate(self._split_re.split(encoded)):
            if not part:
                continue
            if i % 2:
                out.append(Segment.reference(self._identifier_of[part]))
            else:
                out.append(Segment.literal(part))
        return out

    # ------------------------------------------------------------------ #
    # Matching / splitting
    # ------------------------------------------------------------------ #

    @staticmethod
    def _find_all(haystack: str, needle: str) -> List[int]:
        hits: List[int] = []
        pos = haystack.find(needle)
        while pos != -1:
            hits.append(pos)
            pos = haystack.find(needle, pos + len(needle))
        return hits

    def count(self, pattern: Pattern) -> int:
        """Number of non-overlapping occurrences of *pattern*."""
        needle = self._encode(pattern)
        if not needle:
            return 0
        return len(self._find_all(self._encoded_view(), needle))

    def replace(self, pattern: Pattern, identifier: str) -> Rewrite:
        """
        Split every segment range that contains *pattern* and put a
        reference to *identifier* at each occurrence.
        """
        needle = self._encode(pattern)
        if not needle:
            return Rewrite(start=0)
        encoded = self._encoded_view()
        hits = self._find_all(encoded, needle)
        if not hits:
            return Rewrite(start=0)

        # encoded offset where each segment starts
        starts: List[int] = []
        offset = 0
        for seg in self.segments:
            starts.append(offset)
            offset += len(seg.value) if seg.is_literal else 1

        lo = self._segment_at(starts, hits[0])
        hi = self._segment_at(starts, hits[-1] + len(needle) - 1)
        span_start = starts[lo]
        span_end = starts[hi + 1] if hi + 1 < len(starts) else len(encoded)

        ref = self._sentinel(identifier)
        span = encoded[span_start:span_end].replace(needle, ref)
        inserted = self._decode(span)
        removed = self.segments[lo:hi + 1]
        self.segments[lo:hi + 1] = inserted
        self._encoded = None
        return Rewrite(start=lo, removed=removed, inserted=inserted, count=len(hits))

    def undo(self, rewrite: Rewrite) -> None:
        if not rewrite.count:
            return
        stop = rewrite.start + len(rewrite.inserted)
        self.segments[rewrite.start:stop] = rewrite.removed
        self._encoded = None

    @staticmethod
    def _segment_at(starts: Sequence[int], pos: int) -> int:
        # rightmost segment starting at or before pos
        lo, hi = 0, len(starts) - 1
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if starts[mid] <= pos:
                lo = mid
            else:
                hi = mid - 1
        return lo


def pattern_from_text(text: str) -> Pattern:
    return (Segment.literal(text),) if text else ()


def pattern_text(pattern: Pattern, reference_fmt: str = "${%s}") -> str:
    return "".join(s.value if s.kind is SegmentKind.LITERAL else reference_fmt % s.value for s in pattern)


__all__ = ["SegmentArena", "pattern_from_text", "pattern_text"]
