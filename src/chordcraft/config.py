"""Configuration dataclasses for generation and deduplication runs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationConfig:
    """Tunable parameters for the model call."""

    model: str = "gpt-4o"
    temperature: float = 0.7
    request_timeout: float = 60.0


@dataclass(frozen=True)
class DedupConfig:
    """Tunable parameters for a deduplication run."""

    batch_size: int = 500
