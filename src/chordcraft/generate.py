"""OpenAI-powered chord progression generation with a deterministic fallback.

Each request walks the states in ``GenerationState``. Exactly one model
call is made; a transport error, an empty reply, malformed JSON or a reply
that fails validation all end in the fallback generator, so callers always
receive a usable progression.
"""

from __future__ import annotations

import os
import random
from enum import Enum
from typing import List, Optional

from openai import OpenAI, OpenAIError

from chordcraft.config import GenerationConfig
from chordcraft.errors import ConfigurationError, ModelCallError, ValidationFailure
from chordcraft.fallback import generate_fallback
from chordcraft.models import GenerationParams, GenerationResult, Progression
from chordcraft.output import StepTimer, log, warn
from chordcraft.prompts import SYSTEM_PROMPT, build_user_prompt
from chordcraft.theory import adjust_scale, chords_to_numerals
from chordcraft.validation import (
    normalize_chords,
    parse_model_json,
    response_problems,
)


class GenerationState(str, Enum):
    START = "start"
    PROMPTING = "prompting"
    AWAITING_MODEL = "awaiting_model"
    VALIDATING = "validating"
    SUCCESS = "success"
    FALLBACK = "fallback"
    DONE = "done"


def make_client(cfg: GenerationConfig) -> OpenAI:
    """Build an OpenAI client, failing fast when no API key is configured."""
    if not os.getenv("OPENAI_API_KEY"):
        raise ConfigurationError(
            "OPENAI_API_KEY is not set; cannot call the generative model."
        )
    return OpenAI(timeout=cfg.request_timeout)


def request_completion(
    client: OpenAI, user_prompt: str, cfg: GenerationConfig
) -> str:
    """Make the single model call and return its text content."""
    try:
        resp = client.chat.completions.create(
            model=cfg.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=cfg.temperature,
            timeout=cfg.request_timeout,
        )
    except OpenAIError as e:
        raise ModelCallError(f"OpenAI request failed: {e}") from e

    content = resp.choices[0].message.content if resp.choices else None
    if not content:
        raise ModelCallError("No content in OpenAI response.")
    return content


def _parallel_numerals(
    raw: object, chords: List[str], params: GenerationParams
) -> List[str]:
    if (
        isinstance(raw, list)
        and len(raw) == len(chords)
        and all(isinstance(n, str) for n in raw)
    ):
        return list(raw)
    return chords_to_numerals(chords, params.key, params.scale)


def accept_reply(content: str, params: GenerationParams) -> GenerationResult:
    """Parse, validate and normalize a model reply.

    Raises ValidationFailure when the reply cannot be used.
    """
    data = parse_model_json(content)
    problems = response_problems(data)
    if problems:
        raise ValidationFailure(
            "Response failed validation:\n- " + "\n- ".join(problems)
        )
    chords = normalize_chords(data["chords"])
    return GenerationResult(
        chords=chords,
        insights=list(data["insights"]),
        numerals=_parallel_numerals(data.get("numerals"), chords, params),
        source="ai",
    )


def generate_progression(
    client: OpenAI,
    params: GenerationParams,
    cfg: GenerationConfig,
    rng: Optional[random.Random] = None,
) -> GenerationResult:
    """Generate one chord progression, falling back when the model fails."""
    state = GenerationState.START
    params = params.resolved()

    state = GenerationState.PROMPTING
    params = params.with_scale(adjust_scale(params.scale, params.starting_chord))
    user_prompt = build_user_prompt(params)

    result: Optional[GenerationResult] = None
    try:
        state = GenerationState.AWAITING_MODEL
        with StepTimer(
            f"{cfg.model} request for {params.key} {params.scale} "
            f"{params.mood} {params.style}"
        ):
            content = request_completion(client, user_prompt, cfg)

        state = GenerationState.VALIDATING
        result = accept_reply(content, params)
        state = GenerationState.SUCCESS
    except (ModelCallError, ValidationFailure) as e:
        warn(f"Generation failed while {state.value}: {e}")
        state = GenerationState.FALLBACK
        result = generate_fallback(params, rng)

    log(
        f"[{state.value}] {len(result.chords)} chords, "
        f"{len(result.insights)} insights ({result.source})"
    )
    state = GenerationState.DONE
    return result


def build_progression(
    params: GenerationParams, result: GenerationResult
) -> Progression:
    """Create a new, unsaved progression record from a generation result."""
    p = params.resolved()
    return Progression(
        key=p.key,
        scale=adjust_scale(p.scale, p.starting_chord),
        mood=p.mood,
        style=p.style,
        chords=list(result.chords),
        numerals=list(result.numerals),
        insights=list(result.insights),
        starting_chord=p.starting_chord,
    )
