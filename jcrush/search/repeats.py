"""
Repeated substring search.

Finds substrings that occur at least ``min_occurrences`` times in a text,
grows them one character at a time from ``min_len`` up to ``max_len`` and
ranks them by estimated value. Matches never cross a break marker.
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from ..types import Candidate, SearchConstraints

_WORD_CHAR_RE = re.compile(r"\w")
_CLEAN_HEAD_RE = re.compile(r"^\W+")
_CLEAN_TAIL_RE = re.compile(r"\W+$")

# (chunk index, start offset)
_Position = Tuple[int, int]


def split_chunks(text: str, break_markers: Sequence[str]) -> List[str]:
    markers = [m for m in break_markers if m]
    if not markers:
        return [text]
    # longest first so that overlapping markers split on the longer one
    rx = "|".join(re.escape(m) for m in sorted(set(markers), key=len, reverse=True))
    return re.split(rx, text)


def _count_non_overlapping(chunks: Sequence[str], sub: str) -> int:
    return sum(chunk.count(sub) for chunk in chunks)


def _on_word_boundaries(chunks: Sequence[str], sub: str) -> bool:
    """True if some occurrence of *sub* starts and ends on a word boundary."""
    head_word = bool(_WORD_CHAR_RE.match(sub[0]))
    tail_word = bool(_WORD_CHAR_RE.match(sub[-1]))
    for chunk in chunks:
        pos = chunk.find(sub)
        while pos != -1:
            end = pos + len(sub)
            before = chunk[pos - 1] if pos > 0 else ""
            after = chunk[end] if end < len(chunk) else ""
            ok_head = not head_word or not before or not _WORD_CHAR_RE.match(before)
            ok_tail = not tail_word or not after or not _WORD_CHAR_RE.match(after)
            if ok_head and ok_tail:
                return True
            pos = chunk.find(sub, pos + 1)
    return False


def _repeated_substrings(chunks: Sequence[str], c: SearchConstraints) -> Dict[str, int]:
    """All repeated substrings of length min_len..max_len with their overlapping counts."""
    found: Dict[str, int] = {}
    length = max(1, c.min_len)

    level: Dict[str, List[_Position]] = defaultdict(list)
    for ci, chunk in enumerate(chunks):
        for i in range(len(chunk) - length + 1):
            level[chunk[i:i + length]].append((ci, i))

    while level and length <= c.max_len:
        grown: Dict[str, List[_Position]] = defaultdict(list)
        for sub, positions in level.items():
            if len(positions) < c.min_occurrences:
                continue
            found[sub] = len(positions)
            if length == c.max_len:
                continue
            for ci, i in positions:
                chunk = chunks[ci]
                if i + length < len(chunk):
                    grown[chunk[i:i + length + 1]].append((ci, i))
        level = grown
        length += 1
    return found


def _post_process(sub: str, c: SearchConstraints) -> str:
    if c.trim:
        sub = sub.strip()
    if c.clean:
        sub = _CLEAN_TAIL_RE.sub("", _CLEAN_HEAD_RE.sub("", sub))
    return sub


def find_repeats(text: str, constraints: SearchConstraints) -> List[Candidate]:
    """
    Ranked repeated substrings of *text*.

    Score is ``(len - penalty) * count`` where count is the number of
    non-overlapping occurrences; ties prefer longer, then lexicographically
    smaller substrings.

    Nothing is cached between calls: each call indexes every substring of
    ``min_len`` characters and grows the repeated ones up to ``max_len``,
    so time and memory are O(len(text) * max_len) per call. The driver
    calls this once per accepted replacement.
    """
    c = constraints
    chunks = split_chunks(text, c.break_markers)
    scored: Dict[str, int] = {}

    for raw in _repeated_substrings(chunks, c):
        sub = _post_process(raw, c)
        if sub in scored or len(sub) < c.min_len or len(sub) > c.max_len:
            continue
        if any(o and o in sub for o in c.omit):
            continue
        if c.words and not _on_word_boundaries(chunks, sub):
            continue
        count = _count_non_overlapping(chunks, sub)
        if count < c.min_occurrences:
            continue
        scored[sub] = count

    ranked = sorted(
        scored.items(),
        key=lambda kv: (-(len(kv[0]) - c.penalty) * kv[1], -len(kv[0]), kv[0]),
    )
    return [Candidate(substring=s, count=n) for s, n in ranked[:max(0, c.max_results)]]


__all__ = ["find_repeats", "split_chunks"]
