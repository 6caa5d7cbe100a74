"""Tests for model reply parsing, validation and chord normalization."""

import pytest

from chordcraft.errors import ValidationFailure
from chordcraft.validation import (
    normalize_chord,
    normalize_chords,
    parse_model_json,
    response_problems,
    sanitize_model_output,
    validate_response,
)

LONG = "This insight explains the harmonic motion in detail. " * 3


def _payload(**overrides):
    data = {
        "chords": ["C", "Am", "F", "G", "Em", "F", "G", "C"],
        "insights": [LONG, LONG, LONG],
        "numerals": ["I", "vi", "IV", "V", "iii", "IV", "V", "I"],
    }
    data.update(overrides)
    return data


class TestValidateResponse:
    def test_valid_payload(self):
        assert validate_response(_payload()) is True

    def test_exactly_six_chords_accepted(self):
        assert validate_response(_payload(chords=["C", "Am", "F", "G", "C", "G"]))

    def test_five_chords_rejected(self):
        assert not validate_response(_payload(chords=["C", "Am", "F", "G", "C"]))

    def test_two_insights_rejected(self):
        assert not validate_response(_payload(insights=[LONG, LONG]))

    def test_short_insight_rejected(self):
        assert not validate_response(_payload(insights=[LONG, LONG, "Too short."]))

    def test_insight_of_exactly_minimum_length_accepted(self):
        assert validate_response(_payload(insights=[LONG, LONG, "x" * 100]))

    def test_non_string_insight_rejected(self):
        assert not validate_response(_payload(insights=[LONG, LONG, 42]))

    def test_chord_objects_with_name_accepted(self):
        chords = [{"name": c, "notation": c} for c in ["C", "G", "Am", "F", "C", "G"]]
        assert validate_response(_payload(chords=chords))

    def test_chord_object_without_name_rejected(self):
        chords = ["C", "G", "Am", "F", "C", {"notation": "G"}]
        assert not validate_response(_payload(chords=chords))

    def test_numerals_not_checked(self):
        assert validate_response(_payload(numerals="garbage"))
        assert validate_response({k: v for k, v in _payload().items() if k != "numerals"})

    def test_missing_fields(self):
        assert not validate_response({"chords": _payload()["chords"]})
        assert not validate_response({"insights": [LONG] * 3})

    def test_never_raises_on_odd_input(self):
        for value in [None, [], "text", 3, {"chords": "CGAmF", "insights": None}]:
            assert validate_response(value) is False

    def test_problems_are_listed(self):
        problems = response_problems({"chords": ["C"], "insights": ["short"]})
        assert len(problems) == 3
        assert any("Too few chords" in p for p in problems)
        assert any("Too few insights" in p for p in problems)
        assert any("shorter than 100" in p for p in problems)


class TestParseModelJson:
    def test_plain_json(self):
        assert parse_model_json('{"chords": []}') == {"chords": []}

    def test_fenced_json(self):
        assert parse_model_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(ValidationFailure, match="not valid JSON"):
            parse_model_json("chords: C G Am F")

    def test_array_rejected(self):
        with pytest.raises(ValidationFailure, match="not an object"):
            parse_model_json('["C", "G"]')

    def test_sanitize_passthrough(self):
        assert sanitize_model_output('  {"a": 1}  ') == '{"a": 1}'


class TestNormalizeChords:
    def test_mixed_entries(self):
        entries = ["C", {"name": "Am", "notation": "Am"}, {"notation": "F"}]
        assert normalize_chords(entries) == ["C", "Am", "F"]

    def test_name_preferred_over_notation(self):
        assert normalize_chord({"name": "G7", "notation": "G dom7"}) == "G7"

    def test_unusable_entry(self):
        with pytest.raises(ValidationFailure):
            normalize_chord({"name": 5})
        with pytest.raises(ValidationFailure):
            normalize_chord(7)
