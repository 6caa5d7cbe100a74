"""Tests for record types and document conversion."""

from datetime import datetime, timezone

import pytest

from chordcraft.models import (
    GenerationParams,
    Progression,
    Report,
    ReportStatus,
    chord_name,
)


class TestGenerationParams:
    def test_blank_fields_take_defaults(self):
        params = GenerationParams(key="", scale="  ", mood="", style="", starting_chord=" ")
        resolved = params.resolved()
        assert resolved == GenerationParams("C", "major", "happy", "any style", None)

    def test_normalizes_case_and_whitespace(self):
        resolved = GenerationParams(" G ", "Dorian", "SAD", " jazz ").resolved()
        assert (resolved.key, resolved.scale, resolved.mood, resolved.style) == (
            "G", "dorian", "sad", "jazz",
        )

    def test_with_scale(self):
        params = GenerationParams("A", "major").with_scale("minor")
        assert params.scale == "minor" and params.key == "A"


class TestChordName:
    def test_string(self):
        assert chord_name("F#m") == "F#m"

    def test_object(self):
        assert chord_name({"name": "Bb", "notes": ["Bb", "D", "F"]}) == "Bb"

    def test_notation_fallback(self):
        assert chord_name({"notation": "Em"}) == "Em"

    def test_unrecognized(self):
        with pytest.raises(ValueError):
            chord_name({"notes": ["C"]})


class TestProgressionDocument:
    def test_round_trip_fields(self):
        when = datetime(2024, 1, 2, tzinfo=timezone.utc)
        original = Progression(
            id="p1", key="E", scale="minor", mood="sad", style="folk",
            chords=["Em", "C", "G", "D"], numerals=["i", "VI", "III", "VII"],
            insights=["a"], quality_score=88.0, likes=4, flags=1,
            reported=True, report_reason="dull", reported_at=when,
            created_at=when, regeneration_count=2, starting_chord="Em",
        )
        doc = original.to_document()
        assert doc["qualityScore"] == 88.0
        assert doc["regenerationCount"] == 2
        assert "id" not in doc
        assert Progression.from_document("p1", doc) == original

    def test_sparse_document(self):
        progression = Progression.from_document("p9", {"chords": ["C"]})
        assert progression.key == ""
        assert progression.quality_score is None
        assert progression.likes == 0
        assert progression.regeneration_count == 0
        assert progression.created_at is not None

    def test_non_string_insights_kept(self):
        progression = Progression.from_document("p1", {"insights": ["ok", 3, None]})
        assert progression.insights == ["ok", 3, None]

    def test_unknown_chord_objects_kept_as_text(self):
        progression = Progression.from_document("p1", {"chords": [{"x": 1}]})
        assert progression.chords == ['{"x": 1}']


class TestReportDocument:
    def test_status_serialized_as_value(self):
        report = Report(id="r1", progression_id="p1", reason="bad")
        doc = report.to_document()
        assert doc["status"] == "pending"
        assert doc["progressionId"] == "p1"

    def test_from_document(self):
        report = Report.from_document(
            "r1", {"progressionId": "p1", "status": "regenerated"}
        )
        assert report.status is ReportStatus.REGENERATED
        assert report.resolved_at is None
