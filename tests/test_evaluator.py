import logging

from jcrush.evaluator import COST_MODELS, CandidateEvaluator, CostModel
from jcrush.segments import SegmentArena, pattern_from_text
from jcrush.types import Candidate, Segment

L = Segment.literal
R = Segment.reference


def test_estimate_formula():
    cost = CostModel(overhead=4, boilerplate=4)
    assert cost.estimate(26, 1, 3) == (26 - 1 - 4) * 3 - (1 + 26 + 4)
    assert cost.estimate(10, 1, 2) == -5
    assert COST_MODELS["template"].overhead == 3


def test_first_profitable_candidate_is_selected():
    text = "ab-ab-ab-" + "document.getElementById(" * 3
    ev = CandidateEvaluator("concat", SegmentArena(text))
    cands = [Candidate("ab-", 3), Candidate("document.getElementById(", 3)]

    outcome = ev.select(cands, "a", known=())
    sel = outcome.selection
    assert sel is not None
    assert sel.index == 1
    assert sel.skipped == 1
    assert sel.pattern == pattern_from_text("document.getElementById(")
    assert sel.savings == (24 - 1 - 4) * 3 - (1 + 24 + 4)
    assert outcome.examined == 2


def test_start_offset_skips_earlier_candidates():
    text = "document.getElementById(" * 3
    ev = CandidateEvaluator("concat", SegmentArena(text))
    cands = [Candidate("document.getElementById(", 3)]
    outcome = ev.select(cands, "a", known=(), start=1)
    assert outcome.selection is None
    assert outcome.examined == 0


def test_unmatchable_candidate_is_skipped_with_diagnostic(caplog):
    ev = CandidateEvaluator("concat", SegmentArena("nothing repeats here"))
    with caplog.at_level(logging.WARNING, logger="jcrush.evaluator"):
        outcome = ev.select([Candidate("not in the text at all", 5)], "a", known=())
    assert outcome.selection is None
    assert "not found in working text" in caplog.text


def test_escaped_candidate_is_normalized():
    text = "x=`hello world`;y=`hello world`;z=`hello world`;"
    ev = CandidateEvaluator("concat", SegmentArena(text))
    pattern = ev.resolve(Candidate("\\`hello world\\`", 3), known=())
    assert pattern == pattern_from_text("`hello world`")


def test_candidate_containing_boundary_marker_is_rejected():
    ev = CandidateEvaluator("concat", SegmentArena("abcabc"), boundary_marker="|")
    assert ev.resolve(Candidate("abc|abc", 2), known=()) is None


def test_template_candidate_is_trimmed_and_tokenized():
    arena = SegmentArena("foo-AB-foo-AB")
    arena.replace(pattern_from_text("AB"), "a")
    ev = CandidateEvaluator("template", arena)

    pattern = ev.resolve(Candidate("a}-foo-${a}", 2), known={"a"})
    assert pattern == (L("-foo-"), R("a"))


def test_body_length_uses_emitted_notation():
    ev = CandidateEvaluator("template", SegmentArena("x"))
    # x\` + ${a}
    assert ev.body_length((L("x`"), R("a"))) == 7
    # no reference: shortest quoted body
    assert ev.body_length((L("it's"),)) == 4
