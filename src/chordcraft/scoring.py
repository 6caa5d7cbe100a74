"""Heuristic 0-100 quality score used to rank duplicate progressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from chordcraft.models import Progression

MIN_CHORDS = 4
MIN_INSIGHTS = 3
MIN_INSIGHT_LENGTH = 100


@dataclass(frozen=True)
class QualityAssessment:
    score: float
    issues: List[str] = field(default_factory=list)


def assess_quality(progression: Progression) -> QualityAssessment:
    """Score a progression and list the content issues that cost points.

    A stored ``quality_score`` is returned unchanged.
    """
    if progression.quality_score is not None:
        return QualityAssessment(progression.quality_score)

    score = 100.0
    issues: List[str] = []
    chords = progression.chords
    insights = progression.insights

    if len(chords) < MIN_CHORDS:
        issues.append("Insufficient chord count")
        score -= 20
    if len(insights) < MIN_INSIGHTS:
        issues.append("Insufficient insights")
        score -= 20
    if any(isinstance(i, str) and len(i) < MIN_INSIGHT_LENGTH for i in insights):
        issues.append("Some insights are too short")
        score -= 15

    # Flat penalty on top of the specific deductions above.
    score -= 5 * len(issues)

    if len(chords) > 8:
        score += min((len(chords) - 8) * 2, 10)
    if len(insights) > 3:
        score += min((len(insights) - 3) * 3, 10)
    if insights:
        # Non-text entries count toward the average with length 0.
        text_length = sum(len(i) for i in insights if isinstance(i, str))
        avg_length = text_length / len(insights)
        if avg_length > 150:
            score += min((avg_length - 150) / 10, 10)

    if progression.reported:
        score -= 30
    if progression.flags > 0:
        score -= min(progression.flags * 5, 20)
    if progression.likes > 0:
        score += min(progression.likes * 2, 20)

    return QualityAssessment(max(0.0, min(100.0, score)), issues)


def quality_score(progression: Progression) -> float:
    return assess_quality(progression).score
