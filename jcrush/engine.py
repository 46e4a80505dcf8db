"""
Replacement driver.

Runs the search → evaluate → rewrite loop over a segment arena and hands
the result to the assembler. Every failure path degrades to returning the
source text unchanged.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, computed_field

from .assembler import assemble, render_value
from .config import CrushOptions, merge_options
from .evaluator import COST_MODELS, CandidateEvaluator, Selection
from .naming import IdentifierAllocator
from .quoting import has_unescaped_interpolation
from .search import SearchFn, find_repeats
from .segments import SegmentArena
from .types import Candidate, OutputMode, Pattern, SearchConstraints
from .utils import byte_len

logger = logging.getLogger(__name__)

BOUNDARY_UNIT = "␞"


def make_boundary_marker(text: str, unit: str = BOUNDARY_UNIT) -> str:
    """Shortest run of *unit* that does not occur in *text*."""
    marker = unit
    while marker in text:
        marker += unit
    return marker


class DriverState(Enum):
    SEARCHING = "searching"
    EVALUATING = "evaluating"
    REWRITING = "rewriting"
    DONE = "done"


class CrushResult(BaseModel):
    """Outcome of one crush run."""
    code: str
    changed: bool
    mode: OutputMode
    original_bytes: int
    output_bytes: int
    replacements: Dict[str, str] = {}
    warnings: List[str] = []

    @computed_field  # type: ignore[misc]
    @property
    def saved_bytes(self) -> int:
        return self.original_bytes - self.output_bytes


class Crusher:
    """
    One crush run.

    All mutable state (arena, binding table, allocator cursor, skip offset)
    belongs to the instance; a Crusher is not reused across inputs.
    """

    def __init__(self, options: CrushOptions, search: Optional[SearchFn] = None):
        self.options = options
        self.search: SearchFn = search or find_repeats
        self.cost = COST_MODELS[options.mode]
        self.allocator = IdentifierAllocator(options.reserved)
        self.table: Dict[str, Pattern] = {}
        self.warnings: List[str] = []
        self.skip = 0

    # ------------------------------------------------------------------ #
    # Entry
    # ------------------------------------------------------------------ #

    def run(self, source: str) -> CrushResult:
        opts = self.options
        text = source.strip() if opts.strip else source

        if opts.mode == "template" and has_unescaped_interpolation(text):
            self._warn("Template mode needs source without unescaped ${ ... }; keeping original.")
            return self._unchanged(source)

        self.marker = make_boundary_marker(text)
        self.arena = SegmentArena(text)
        self.evaluator = CandidateEvaluator(
            opts.mode, self.arena, boundary_marker=self.marker, ascii_safe=opts.ascii_safe,
        )

        self._loop()

        if not self.table:
            if opts.summary:
                logger.warning("JCrush could not optimize code. Keeping original.")
            return self._unchanged(source)

        out = assemble(self.arena.segments, self.table, opts)
        original_bytes, output_bytes = byte_len(source), byte_len(out)
        if output_bytes >= original_bytes:
            if opts.summary:
                logger.warning(
                    "JCrush output (%d bytes) is not smaller than input (%d bytes). Keeping original.",
                    output_bytes, original_bytes,
                )
            return self._unchanged(source)

        if opts.summary:
            logger.info("JCrush reduced code by %d bytes.", original_bytes - output_bytes)
        return CrushResult(
            code=out,
            changed=True,
            mode=opts.mode,
            original_bytes=original_bytes,
            output_bytes=output_bytes,
            replacements={k: render_value(v, opts) for k, v in self.table.items()},
            warnings=list(self.warnings),
        )

    # ------------------------------------------------------------------ #
    # State machine
    # ------------------------------------------------------------------ #

    def _loop(self) -> None:
        opts = self.options
        state = DriverState.SEARCHING
        candidates: Sequence[Candidate] = ()
        cursor = 0
        selection: Optional[Selection] = None
        iterations = 0

        while state is not DriverState.DONE:
            if state is DriverState.SEARCHING:
                if iterations >= opts.max_iterations:
                    logger.debug("Iteration cap %d reached.", opts.max_iterations)
                    state = DriverState.DONE
                    continue
                iterations += 1
                if opts.skip_scope == "iteration":
                    self.skip = 0
                candidates = self._search()
                cursor = self.skip
                state = DriverState.EVALUATING if candidates else DriverState.DONE

            elif state is DriverState.EVALUATING:
                outcome = self.evaluator.select(
                    candidates, self.allocator.peek(), self.table.keys(), start=cursor,
                )
                selection = outcome.selection
                if selection is None:
                    self.skip += outcome.examined
                    state = DriverState.DONE
                else:
                    self.skip += selection.skipped
                    cursor = selection.index + 1
                    state = DriverState.REWRITING

            elif state is DriverState.REWRITING:
                if selection is None:
                    state = DriverState.DONE
                    continue
                if self._rewrite(selection):
                    capped = opts.max_replacements and len(self.table) >= opts.max_replacements
                    state = DriverState.DONE if capped else DriverState.SEARCHING
                else:
                    self.skip += 1
                    state = DriverState.EVALUATING

    def _search(self) -> Sequence[Candidate]:
        opts = self.options
        ident_len = len(self.allocator.peek())
        floor = ident_len + self.cost.overhead + 1
        max_results = opts.max_results + (self.skip if opts.skip_scope == "run" else 0)
        constraints = SearchConstraints(
            min_len=floor,
            max_len=max(opts.max_len, floor),
            min_occurrences=opts.min_occurrences,
            max_results=max_results,
            penalty=floor,
            omit=tuple(opts.omit),
            words=opts.words,
            trim=opts.trim,
            clean=opts.clean,
            break_markers=tuple(opts.break_markers) + (self.marker,),
        )
        try:
            return list(self.search(self._working_text(), constraints) or ())
        except Exception as e:
            logger.error("Substring search failed: %s", e)
            self._warn(f"search failed: {e}")
            return ()

    def _working_text(self) -> str:
        if self.options.mode == "template":
            return self.arena.render()
        return self.arena.join_literals(self.marker)

    def _rewrite(self, selection: Selection) -> bool:
        ident = self.allocator.peek()
        rewrite = self.arena.replace(selection.pattern, ident)
        actual = self.evaluator.cost.estimate(
            self.evaluator.body_length(selection.pattern), len(ident), rewrite.count,
        )
        if rewrite.count < 2 or actual < 1:
            logger.debug(
                "Undoing %r: %d occurrence(s), estimate %d.",
                selection.candidate.substring, rewrite.count, actual,
            )
            self.arena.undo(rewrite)
            return False

        self.table[self.allocator.allocate()] = selection.pattern
        if self.options.progress:
            logger.info("Replacing %r saves %d bytes.", selection.candidate.substring, actual)
        return True

    # ------------------------------------------------------------------ #

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def _unchanged(self, source: str) -> CrushResult:
        n = byte_len(source)
        return CrushResult(
            code=source,
            changed=False,
            mode=self.options.mode,
            original_bytes=n,
            output_bytes=n,
            warnings=list(self.warnings),
        )


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #

def crush(
    source: str,
    options: Optional[CrushOptions] = None,
    *,
    search: Optional[SearchFn] = None,
    **overrides: Any,
) -> CrushResult:
    """
    Deduplicate repeated substrings of JavaScript *source*.

    *overrides* (field names or short aliases) are applied on top of
    *options* without modifying it.
    """
    opts = merge_options(options, overrides)
    return Crusher(opts, search=search).run(source)


def crush_code(
    source: str,
    options: Optional[CrushOptions] = None,
    *,
    search: Optional[SearchFn] = None,
    **overrides: Any,
) -> str:
    """Crushed program text (or *source* itself when nothing is gained)."""
    return crush(source, options, search=search, **overrides).code


__all__ = [
    "BOUNDARY_UNIT",
    "make_boundary_marker",
    "DriverState",
    "CrushResult",
    "Crusher",
    "crush",
    "crush_code",
]
