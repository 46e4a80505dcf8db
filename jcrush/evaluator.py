"""
Candidate evaluation.

Estimates the net byte savings of binding a candidate substring to an
identifier and picks the first candidate, in search-rank order, whose
estimate is at least one byte.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Optional, Sequence

from .quoting import (
    encoded_length,
    fix_interpolation_boundary,
    render_template_body,
    split_interpolations,
    unescape_template,
)
from .segments import SegmentArena
from .types import Candidate, OutputMode, Pattern, Segment
from .utils import byte_len

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostModel:
    """
    overhead:    per-occurrence cost of a reference on top of the identifier
                 (``'+a+'`` → 4, ``${a}`` → 3)
    boilerplate: per-binding cost on top of identifier and body (``='',`` → 4)
    """
    overhead: int
    boilerplate: int

    def estimate(self, body_len: int, identifier_len: int, count: int) -> int:
        # Adjacent occurrences share delimiters; not corrected for here.
        return (
            (body_len - identifier_len - self.overhead) * count
            - (identifier_len + body_len + self.boilerplate)
        )


COST_MODELS = {
    "concat": CostModel(overhead=4, boilerplate=4),
    "template": CostModel(overhead=3, boilerplate=4),
}


@dataclass(frozen=True)
class Selection:
    """Accepted candidate together with where evaluation stopped."""
    index: int
    candidate: Candidate
    pattern: Pattern
    savings: int
    skipped: int  # rejects passed over before this one


@dataclass(frozen=True)
class EvalOutcome:
    selection: Optional[Selection]
    examined: int  # candidates looked at, accepted one included


class CandidateEvaluator:
    """
    Turns raw search candidates into patterns over the arena and scores them.

    In template mode a candidate may carry ``${id}`` spans of earlier
    bindings; partial spans at either end are trimmed first.
    """

    def __init__(
        self,
        mode: OutputMode,
        arena: SegmentArena,
        *,
        boundary_marker: str = "",
        ascii_safe: bool = False,
    ):
        self.mode = mode
        self.arena = arena
        self.boundary_marker = boundary_marker
        self.ascii_safe = ascii_safe
        self.cost = COST_MODELS[mode]

    # ------------------------------------------------------------------ #

    def body_length(self, pattern: Pattern) -> int:
        """Escaped byte length of *pattern* in the notation it will be emitted in."""
        if self.mode == "template":
            if any(s.is_reference for s in pattern):
                return byte_len(render_template_body(pattern, self.ascii_safe))
        return encoded_length("".join(s.value for s in pattern), self.ascii_safe)

    def _to_pattern(self, text: str, known: Collection[str]) -> Pattern:
        if self.mode != "template":
            return (Segment.literal(text),) if text else ()
        pieces = []
        for chunk, ident in split_interpolations(text, known):
            pieces.append(Segment.reference(ident) if ident else Segment.literal(chunk))
        return tuple(pieces)

    def resolve(self, candidate: Candidate, known: Collection[str]) -> Optional[Pattern]:
        """
        Pattern for *candidate* that actually occurs in the arena, or None.

        A candidate that is not found verbatim gets one unescaping pass
        before it is given up.
        """
        text = candidate.substring
        if self.mode == "template":
            text = fix_interpolation_boundary(text)
        if not text or (self.boundary_marker and self.boundary_marker in text):
            return None

        pattern = self._to_pattern(text, known)
        if pattern and self.arena.count(pattern):
            return pattern

        normalized = unescape_template(text)
        if normalized != text:
            pattern = self._to_pattern(normalized, known)
            if pattern and self.arena.count(pattern):
                return pattern

        logger.warning("Candidate %r not found in working text, skipping.", candidate.substring)
        return None

    def select(
        self,
        candidates: Sequence[Candidate],
        identifier: str,
        known: Collection[str],
        start: int = 0,
    ) -> EvalOutcome:
        """First acceptable candidate at or after *start*."""
        skipped = 0
        for index in range(start, len(candidates)):
            cand = candidates[index]
            pattern = self.resolve(cand, known)
            if pattern is None:
                skipped += 1
                continue
            savings = self.cost.estimate(self.body_length(pattern), len(identifier), cand.count)
            if savings >= 1:
                return EvalOutcome(
                    Selection(index=index, candidate=cand, pattern=pattern, savings=savings, skipped=skipped),
                    examined=index - start + 1,
                )
            logger.debug("Rejecting %r (estimate %d).", cand.substring, savings)
            skipped += 1
        return EvalOutcome(None, examined=max(0, len(candidates) - start))


__all__ = ["CostModel", "COST_MODELS", "Selection", "EvalOutcome", "CandidateEvaluator"]
