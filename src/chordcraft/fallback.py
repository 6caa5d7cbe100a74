"""Network-free progression synthesis from roman-numeral templates."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from chordcraft.models import GenerationParams, GenerationResult
from chordcraft.theory import roman_numeral_to_chord

FALLBACK_TEMPLATES: Dict[str, Dict[str, List[List[str]]]] = {
    "major": {
        "happy": [
            ["I", "IV", "V", "I", "IV", "V", "vi", "V"],
            ["I", "V", "vi", "IV", "I", "V", "IV", "I"],
            ["I", "IV", "I", "V", "vi", "IV", "V", "I"],
        ],
        "sad": [
            ["I", "vi", "IV", "V", "vi", "IV", "V", "vi"],
            ["I", "iii", "IV", "iv", "I", "vi", "V", "I"],
            ["I", "vi", "ii", "V", "I", "vi", "IV", "V"],
        ],
        "energetic": [
            ["I", "IV", "V", "V", "I", "IV", "V", "I"],
            ["I", "iii", "IV", "V", "I", "vi", "IV", "V"],
            ["I", "V", "IV", "I", "V", "vi", "IV", "I"],
        ],
        "relaxed": [
            ["I", "IV", "I", "V", "vi", "IV", "I", "V"],
            ["I", "vi", "IV", "I", "V", "vi", "IV", "I"],
            ["I", "iii", "vi", "IV", "I", "iii", "IV", "I"],
        ],
        "dramatic": [
            ["I", "V", "vi", "iii", "IV", "I", "V", "vi"],
            ["I", "vi", "IV", "V", "iii", "vi", "V", "I"],
            ["I", "V", "vi", "IV", "I", "V", "iii", "vi"],
        ],
    },
    "minor": {
        "happy": [
            ["i", "VI", "VII", "i", "VI", "VII", "v", "i"],
            ["i", "III", "VII", "VI", "i", "III", "VII", "i"],
            ["i", "VI", "III", "VII", "i", "VI", "VII", "i"],
        ],
        "sad": [
            ["i", "iv", "v", "i", "VI", "iv", "v", "i"],
            ["i", "VI", "III", "VII", "i", "iv", "v", "i"],
            ["i", "iv", "VII", "i", "VI", "III", "v", "i"],
        ],
        "energetic": [
            ["i", "VII", "VI", "VII", "i", "v", "VI", "VII"],
            ["i", "v", "VI", "VII", "i", "VII", "VI", "i"],
            ["i", "iv", "VII", "v", "i", "iv", "v", "i"],
        ],
        "relaxed": [
            ["i", "III", "VII", "i", "VI", "III", "VII", "i"],
            ["i", "iv", "i", "v", "i", "VI", "v", "i"],
            ["i", "VI", "III", "i", "iv", "i", "v", "i"],
        ],
        "dramatic": [
            ["i", "v", "VI", "III", "i", "VII", "VI", "i"],
            ["i", "iv", "VII", "III", "i", "v", "VI", "i"],
            ["i", "VII", "VI", "v", "i", "iv", "v", "i"],
        ],
    },
    "dorian": {
        "happy": [
            ["i", "IV", "VII", "i", "i", "IV", "i", "VII"],
            ["i", "IV", "i", "VII", "i", "ii", "IV", "i"],
            ["i", "ii", "IV", "VII", "i", "IV", "VII", "i"],
        ],
        "sad": [
            ["i", "III", "IV", "i", "i", "v", "IV", "i"],
            ["i", "IV", "III", "i", "i", "III", "IV", "i"],
            ["i", "v", "IV", "i", "III", "IV", "v", "i"],
        ],
        "energetic": [
            ["i", "IV", "VII", "v", "i", "VII", "IV", "i"],
            ["i", "VII", "IV", "i", "ii", "VII", "IV", "i"],
            ["i", "ii", "VII", "IV", "i", "IV", "VII", "v"],
        ],
        "relaxed": [
            ["i", "IV", "i", "v", "i", "III", "IV", "i"],
            ["i", "III", "IV", "i", "i", "IV", "VII", "i"],
            ["i", "IV", "VII", "i", "i", "IV", "i", "v"],
        ],
        "dramatic": [
            ["i", "v", "IV", "VII", "i", "VII", "v", "IV"],
            ["i", "VII", "v", "IV", "i", "IV", "v", "i"],
            ["i", "IV", "v", "i", "v", "IV", "VII", "i"],
        ],
    },
    "mixolydian": {
        "happy": [
            ["I", "VII", "IV", "I", "I", "IV", "VII", "I"],
            ["I", "IV", "VII", "I", "v", "VII", "IV", "I"],
            ["I", "v", "VII", "IV", "I", "VII", "IV", "I"],
        ],
        "sad": [
            ["I", "v", "IV", "I", "iii", "VII", "I", "I"],
            ["I", "iii", "VII", "I", "I", "VII", "v", "I"],
            ["I", "VII", "v", "I", "I", "v", "IV", "I"],
        ],
        "energetic": [
            ["I", "VII", "I", "VII", "I", "IV", "VII", "IV"],
            ["I", "IV", "VII", "IV", "I", "v", "IV", "VII"],
            ["I", "v", "IV", "VII", "I", "VII", "I", "VII"],
        ],
        "relaxed": [
            ["I", "IV", "I", "VII", "I", "v", "I", "IV"],
            ["I", "v", "I", "IV", "I", "VII", "IV", "I"],
            ["I", "VII", "IV", "I", "I", "IV", "I", "VII"],
        ],
        "dramatic": [
            ["I", "v", "VII", "IV", "I", "VII", "v", "I"],
            ["I", "VII", "v", "I", "I", "IV", "v", "VII"],
            ["I", "IV", "v", "VII", "I", "v", "VII", "IV"],
        ],
    },
}

MOOD_FEELINGS = {
    "happy": "joy and uplift",
    "sad": "melancholy and reflection",
    "energetic": "drive and momentum",
    "relaxed": "calm and peace",
}


def select_template(
    scale: str, mood: str, rng: Optional[random.Random] = None
) -> List[str]:
    """Pick a template for (scale, mood), defaulting to major/happy."""
    rng = rng or random.Random()
    by_mood = FALLBACK_TEMPLATES.get(scale) or FALLBACK_TEMPLATES["major"]
    candidates = by_mood.get(mood) or by_mood["happy"]
    return list(rng.choice(candidates))


def _colour_clause(template: List[str]) -> str:
    if "vi" in template or "iii" in template:
        return "mediant chords adds emotional depth"
    if "IV" in template:
        return "subdominant harmony adds warmth"
    return "dominant harmony adds tension"


def fallback_insights(
    template: List[str], params: GenerationParams
) -> List[str]:
    """Three descriptive insights built from the template's structure."""
    feeling = MOOD_FEELINGS.get(params.mood, "drama and tension")
    first_half = "-".join(template[:4])
    if len(template) > 4 and template[0] == template[4]:
        second_half = "repeating the tonic to reinforce the home key"
    else:
        second_half = "moving to " + "-".join(template[4:8]) + " in the second half"
    if template[-1] == template[0]:
        ending = "resolves back to the tonic, creating a sense of completion"
    else:
        ending = (
            f"ends on a {template[-1]} chord, creating an open-ended feeling"
        )

    return [
        f"This is a {params.mood} progression in {params.key} {params.scale}, "
        f"commonly used in {params.style} music. The progression creates a "
        f"sense of {feeling} through its chord choices and movement.",
        f"The progression follows a {first_half} pattern in the first half, "
        f"{second_half}. This structure creates a balanced feeling between "
        f"tension and resolution, allowing for a satisfying musical journey. "
        f"The use of {_colour_clause(template)} to the progression.",
        f"From a music theory perspective, this progression {ending}. The "
        f"voice leading between chords is smooth, with common tones shared "
        f"between adjacent chords where possible. Try experimenting with "
        f"different voicings and inversions to bring out different aspects "
        f"of this progression's character.",
    ]


def generate_fallback(
    params: GenerationParams, rng: Optional[random.Random] = None
) -> GenerationResult:
    """Build a progression from a random template without any model call."""
    p = params.resolved()
    template = select_template(p.scale, p.mood, rng)
    chords = [roman_numeral_to_chord(n, p.key, p.scale) for n in template]
    return GenerationResult(
        chords=chords,
        insights=fallback_insights(template, p),
        numerals=template,
        source="fallback",
    )
