"""Populate a store with freshly generated progressions."""

from __future__ import annotations

import random
import time
from typing import List, Optional

from openai import OpenAI

from chordcraft.config import GenerationConfig
from chordcraft.generate import build_progression, generate_progression
from chordcraft.models import GenerationParams, Progression
from chordcraft.output import banner, log
from chordcraft.store import ProgressionStore

SEED_KEYS = ["C", "G", "D", "A", "E", "F", "Bb"]
SEED_SCALES = ["major", "minor", "dorian", "mixolydian"]
SEED_MOODS = ["happy", "sad", "energetic", "relaxed", "dramatic"]
SEED_STYLES = ["pop", "rock", "jazz", "folk", "classical", "electronic"]


def seed_combinations(
    count: int,
    *,
    key: Optional[str] = None,
    scale: Optional[str] = None,
    mood: Optional[str] = None,
    style: Optional[str] = None,
    starting_chord: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[GenerationParams]:
    """Pick ``count`` parameter sets; fixed values override random choices."""
    rng = rng or random.Random()
    return [
        GenerationParams(
            key=key or rng.choice(SEED_KEYS),
            scale=scale or rng.choice(SEED_SCALES),
            mood=mood or rng.choice(SEED_MOODS),
            style=style or rng.choice(SEED_STYLES),
            starting_chord=starting_chord,
        )
        for _ in range(count)
    ]


def seed_progressions(
    store: ProgressionStore,
    client: OpenAI,
    cfg: GenerationConfig,
    combos: List[GenerationParams],
    *,
    delay: float = 0.0,
    rng: Optional[random.Random] = None,
) -> List[Progression]:
    """Generate and persist one progression per parameter set."""
    banner(f"Seeding {len(combos)} progressions")
    created: List[Progression] = []
    for i, params in enumerate(combos, start=1):
        result = generate_progression(client, params, cfg, rng)
        progression = build_progression(params, result)
        store.add_progression(progression)
        created.append(progression)
        log(
            f"Added progression {i}/{len(combos)}: {progression.id} "
            f"{progression.key} {progression.scale} {progression.mood} "
            f"{progression.style} [{' '.join(progression.chords)}]"
        )
        if delay > 0 and i < len(combos):
            time.sleep(delay)
    return created
