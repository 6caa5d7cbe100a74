"""Acceptance test and normalization for model-generated progressions."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from chordcraft.errors import ValidationFailure
from chordcraft.models import chord_name

# The prompt quotes these numbers; keep them the only copy.
MIN_AI_CHORDS = 6
PREFERRED_CHORDS = (8, 12)
MIN_INSIGHTS = 3
MIN_INSIGHT_LENGTH = 100
MIN_INSIGHT_SENTENCES = 3


def sanitize_model_output(text: str) -> str:
    """Strip markdown fences and whitespace from a model reply."""
    t = text.strip()
    t = re.sub(r"^```(?:json)?\s*", "", t)
    t = re.sub(r"\s*```$", "", t)
    return t.strip()


def parse_model_json(text: str) -> Dict[str, Any]:
    """Parse a model reply into a JSON object.

    Raises ValidationFailure for malformed JSON or a non-object document.
    """
    try:
        data = json.loads(sanitize_model_output(text))
    except json.JSONDecodeError as e:
        raise ValidationFailure(f"Model reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationFailure(
            f"Model reply is a JSON {type(data).__name__}, not an object."
        )
    return data


def _is_chord_entry(entry: Any) -> bool:
    if isinstance(entry, str):
        return True
    return isinstance(entry, dict) and "name" in entry


def response_problems(data: Any) -> List[str]:
    """List every way a parsed model reply falls short. Never raises."""
    problems: List[str] = []
    if not isinstance(data, dict):
        return ["Response is not a JSON object."]

    chords = data.get("chords")
    if not isinstance(chords, list):
        problems.append("Missing chords list.")
    else:
        if len(chords) < MIN_AI_CHORDS:
            problems.append(
                f"Too few chords: {len(chords)} < {MIN_AI_CHORDS}."
            )
        bad = [c for c in chords if not _is_chord_entry(c)]
        if bad:
            problems.append(f"Unrecognized chord entries: {bad!r}")

    insights = data.get("insights")
    if not isinstance(insights, list):
        problems.append("Missing insights list.")
    else:
        if len(insights) < MIN_INSIGHTS:
            problems.append(
                f"Too few insights: {len(insights)} < {MIN_INSIGHTS}."
            )
        short = [
            i for i in insights
            if not isinstance(i, str) or len(i) < MIN_INSIGHT_LENGTH
        ]
        if short:
            problems.append(
                f"{len(short)} insight(s) shorter than "
                f"{MIN_INSIGHT_LENGTH} characters."
            )
    return problems


def validate_response(data: Any) -> bool:
    """True when the reply can be used as-is."""
    return not response_problems(data)


def normalize_chord(entry: Any) -> str:
    """Canonical string for a chord given as text or ``{name|notation}``."""
    try:
        return chord_name(entry)
    except ValueError as e:
        raise ValidationFailure(str(e)) from e


def normalize_chords(entries: List[Any]) -> List[str]:
    return [normalize_chord(e) for e in entries]
