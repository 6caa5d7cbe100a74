"""Prompt templates for model-driven chord progression generation."""

from __future__ import annotations

from chordcraft.models import GenerationParams
from chordcraft.theory import adjust_scale
from chordcraft.validation import (
    MIN_AI_CHORDS,
    MIN_INSIGHT_LENGTH,
    MIN_INSIGHT_SENTENCES,
    MIN_INSIGHTS,
    PREFERRED_CHORDS,
)

SYSTEM_PROMPT = (
    "You are a music theory expert specializing in chord progressions. "
    "Respond only with valid JSON that meets all the requirements in the "
    "user's prompt."
)

USER_PROMPT_TEMPLATE = """\
Generate a high-quality chord progression in {key} {scale} with a {mood} mood \
in the style of {style} music.{starting_clause}

Requirements:
1. The progression MUST have at least {min_chords} chords, preferably \
{pref_low}-{pref_high} chords for more musical interest and development.
2. Provide at least {min_insights} detailed musical insights about the progression.
3. Each insight must be at least {min_sentences} sentences long and at least \
{min_length} characters, explaining the music theory behind the progression.
4. Include a Roman numeral for each chord, in the same order as the chords.
5. If a starting chord was specified, the progression must begin with that chord.

Respond with a JSON object containing:
- "chords": an array of at least {min_chords} chord symbols (e.g. "Cmaj7", "Dm7", "G7")
- "insights": an array of at least {min_insights} insights, each at least {min_length} characters
- "numerals": an array of Roman numerals, one per chord

Example response format:
{{
  "chords": ["C", "Am", "F", "G", "Em", "F", "G", "C"],
  "numerals": ["I", "vi", "IV", "V", "iii", "IV", "V", "I"],
  "insights": [
    "This progression follows a I-vi-IV-V pattern in the first half, which is common in pop and rock music. The second half introduces the iii chord for added emotional depth. It then resolves back to the tonic.",
    "The movement from C to Am moves between relative major and minor, creating a bittersweet feeling. The later Em reinforces that minor color. Together they soften the otherwise bright key.",
    "The F to G motion builds tension that resolves back to C, forming a IV-V-I cadence. This strong resolution gives the progression a sense of completion. It makes the loop satisfying to repeat."
  ]
}}
"""


def build_user_prompt(params: GenerationParams) -> str:
    """Render the user prompt for resolved, scale-adjusted parameters."""
    p = params.resolved()
    scale = adjust_scale(p.scale, p.starting_chord)
    starting_clause = (
        f" The progression should start with the {p.starting_chord} chord."
        if p.starting_chord
        else ""
    )
    return USER_PROMPT_TEMPLATE.format(
        key=p.key,
        scale=scale,
        mood=p.mood,
        style=p.style,
        starting_clause=starting_clause,
        min_chords=MIN_AI_CHORDS,
        pref_low=PREFERRED_CHORDS[0],
        pref_high=PREFERRED_CHORDS[1],
        min_insights=MIN_INSIGHTS,
        min_sentences=MIN_INSIGHT_SENTENCES,
        min_length=MIN_INSIGHT_LENGTH,
    )
