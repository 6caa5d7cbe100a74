"""Records exchanged between the generator, the scorer and the store."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_KEY = "C"
DEFAULT_SCALE = "major"
DEFAULT_MOOD = "happy"
DEFAULT_STYLE = "any style"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GenerationParams:
    """Inputs for one generation request."""

    key: str = DEFAULT_KEY
    scale: str = DEFAULT_SCALE
    mood: str = DEFAULT_MOOD
    style: str = DEFAULT_STYLE
    starting_chord: Optional[str] = None

    def resolved(self) -> GenerationParams:
        """Return a copy where blank fields take their defaults."""
        return GenerationParams(
            key=(self.key or "").strip() or DEFAULT_KEY,
            scale=(self.scale or "").strip().lower() or DEFAULT_SCALE,
            mood=(self.mood or "").strip().lower() or DEFAULT_MOOD,
            style=(self.style or "").strip() or DEFAULT_STYLE,
            starting_chord=(self.starting_chord or "").strip() or None,
        )

    def with_scale(self, scale: str) -> GenerationParams:
        return replace(self, scale=scale)


@dataclass(frozen=True)
class GenerationResult:
    """Output of the orchestrator; ``source`` is "ai" or "fallback"."""

    chords: List[str]
    insights: List[str]
    numerals: List[str]
    source: str


class ReportStatus(str, Enum):
    PENDING = "pending"
    REGENERATED = "regenerated"
    DISMISSED = "dismissed"


def chord_name(entry: Any) -> str:
    """Name of a stored chord entry, either a string or a ``{name}`` object."""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for field_name in ("name", "notation"):
            value = entry.get(field_name)
            if isinstance(value, str) and value:
                return value
    raise ValueError(f"Unrecognized chord entry: {entry!r}")


def _stored_chord_name(entry: Any) -> str:
    try:
        return chord_name(entry)
    except ValueError:
        return json.dumps(entry, sort_keys=True, default=str)


@dataclass
class Progression:
    """A persisted chord progression.

    Documents in the store use camelCase field names; ``to_document`` and
    ``from_document`` translate at that boundary. Stored insights are kept
    as-is, including entries that are not text.
    """

    id: str = ""
    key: str = DEFAULT_KEY
    scale: str = DEFAULT_SCALE
    mood: str = DEFAULT_MOOD
    style: str = DEFAULT_STYLE
    chords: List[str] = field(default_factory=list)
    numerals: List[str] = field(default_factory=list)
    insights: List[Any] = field(default_factory=list)
    quality_score: Optional[float] = None
    likes: int = 0
    flags: int = 0
    reported: bool = False
    report_reason: Optional[str] = None
    reported_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    regenerated_at: Optional[datetime] = None
    regeneration_count: int = 0
    starting_chord: Optional[str] = None

    @property
    def params(self) -> GenerationParams:
        return GenerationParams(
            key=self.key,
            scale=self.scale,
            mood=self.mood,
            style=self.style,
            starting_chord=self.starting_chord,
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "scale": self.scale,
            "mood": self.mood,
            "style": self.style,
            "chords": list(self.chords),
            "numerals": list(self.numerals),
            "insights": list(self.insights),
            "qualityScore": self.quality_score,
            "likes": self.likes,
            "flags": self.flags,
            "reported": self.reported,
            "reportReason": self.report_reason,
            "reportedAt": self.reported_at,
            "createdAt": self.created_at,
            "regeneratedAt": self.regenerated_at,
            "regenerationCount": self.regeneration_count,
            "startingChord": self.starting_chord,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> Progression:
        score = data.get("qualityScore")
        return cls(
            id=doc_id,
            key=data.get("key") or "",
            scale=data.get("scale") or "",
            mood=data.get("mood") or "",
            style=data.get("style") or "",
            chords=[_stored_chord_name(c) for c in data.get("chords") or []],
            numerals=list(data.get("numerals") or []),
            insights=list(data.get("insights") or []),
            quality_score=float(score) if isinstance(score, (int, float)) else None,
            likes=int(data.get("likes") or 0),
            flags=int(data.get("flags") or 0),
            reported=bool(data.get("reported", False)),
            report_reason=data.get("reportReason"),
            reported_at=data.get("reportedAt"),
            created_at=data.get("createdAt") or utcnow(),
            regenerated_at=data.get("regeneratedAt"),
            regeneration_count=int(data.get("regenerationCount") or 0),
            starting_chord=data.get("startingChord") or None,
        )


@dataclass
class Report:
    """A user report against a progression."""

    id: str = ""
    progression_id: str = ""
    reason: str = ""
    details: str = ""
    status: ReportStatus = ReportStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "progressionId": self.progression_id,
            "reason": self.reason,
            "details": self.details,
            "status": self.status.value,
            "createdAt": self.created_at,
            "resolvedAt": self.resolved_at,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> Report:
        return cls(
            id=doc_id,
            progression_id=data.get("progressionId") or "",
            reason=data.get("reason") or "",
            details=data.get("details") or "",
            status=ReportStatus(data.get("status") or ReportStatus.PENDING.value),
            created_at=data.get("createdAt") or data.get("timestamp") or utcnow(),
            resolved_at=data.get("resolvedAt"),
        )
