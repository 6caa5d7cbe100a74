"""Tests for the quality scoring heuristic."""

import itertools

from chordcraft.models import Progression
from chordcraft.scoring import assess_quality, quality_score

INSIGHT_150 = "x" * 150
CHORDS_8 = ["C", "G", "Am", "F", "C", "G", "F", "C"]


def _prog(**kw):
    kw.setdefault("chords", list(CHORDS_8))
    kw.setdefault("insights", [INSIGHT_150] * 3)
    return Progression(**kw)


class TestPassThrough:
    def test_stored_score_returned_unchanged(self):
        p = _prog(quality_score=42.5, reported=True, flags=9, chords=[])
        assert quality_score(p) == 42.5

    def test_zero_is_a_stored_score(self):
        assert quality_score(_prog(quality_score=0.0, likes=10)) == 0.0


class TestDeductions:
    def test_clean_record_scores_100(self):
        assert quality_score(_prog()) == 100

    def test_empty_record(self):
        # -20 chords, -20 insights, -5 x 2 issues
        assessment = assess_quality(_prog(chords=[], insights=[]))
        assert assessment.score == 50
        assert assessment.issues == ["Insufficient chord count", "Insufficient insights"]

    def test_short_insight_costs_fifteen_plus_five(self):
        p = _prog(insights=[INSIGHT_150, INSIGHT_150, "x" * 50])
        assert quality_score(p) == 80

    def test_all_three_issues(self):
        # -20 -20 -15, then -15 for three issues
        p = _prog(chords=["C", "G", "F"], insights=[INSIGHT_150, "x" * 50])
        assert quality_score(p) == 30

    def test_few_chords_only(self):
        assert quality_score(_prog(chords=["C", "G", "F"])) == 75

    def test_non_text_insights_count_but_are_never_short(self):
        # three insights, none short; average (300 + 300 + 0) / 3 = 200 gives +5
        p = _prog(insights=["x" * 300, "x" * 300, {"text": "hi"}], reported=True)
        assert assess_quality(p).issues == []
        assert quality_score(p) == 75

    def test_only_non_text_insights(self):
        assert quality_score(_prog(insights=[1, None, {"a": 1}])) == 100


class TestBonusesAndPenalties:
    def test_extra_chords(self):
        p = _prog(chords=CHORDS_8 + ["G", "Am", "F", "C"], reported=True)
        assert quality_score(p) == 100 + 8 - 30

    def test_extra_chords_capped(self):
        p = _prog(chords=CHORDS_8 * 3, reported=True)
        assert quality_score(p) == 100 + 10 - 30

    def test_extra_insights(self):
        p = _prog(insights=[INSIGHT_150] * 5, reported=True)
        assert quality_score(p) == 100 + 6 - 30

    def test_extra_insights_capped(self):
        p = _prog(insights=[INSIGHT_150] * 10, reported=True)
        assert quality_score(p) == 100 + 10 - 30

    def test_long_insights(self):
        p = _prog(insights=["x" * 200] * 3, reported=True)
        assert quality_score(p) == 100 + 5 - 30

    def test_long_insights_capped(self):
        p = _prog(insights=["x" * 400] * 3, reported=True)
        assert quality_score(p) == 100 + 10 - 30

    def test_flags(self):
        assert quality_score(_prog(flags=2)) == 90
        assert quality_score(_prog(flags=10)) == 80

    def test_likes(self):
        assert quality_score(_prog(reported=True, likes=3)) == 100 - 30 + 6
        assert quality_score(_prog(reported=True, likes=50)) == 100 - 30 + 20


class TestClamping:
    def test_clamped_at_zero(self):
        p = _prog(chords=[], insights=["short"], reported=True, flags=10)
        assert quality_score(p) == 0

    def test_clamped_at_hundred(self):
        assert quality_score(_prog(likes=10)) == 100

    def test_always_in_range(self):
        for chords, insights, reported, flags, likes in itertools.product(
            [[], CHORDS_8[:3], CHORDS_8, CHORDS_8 * 3],
            [[], ["x" * 20], [INSIGHT_150] * 3, ["x" * 500] * 8],
            [False, True],
            [0, 3, 50],
            [0, 4, 100],
        ):
            p = _prog(
                chords=chords, insights=insights,
                reported=reported, flags=flags, likes=likes,
            )
            assert 0 <= quality_score(p) <= 100
