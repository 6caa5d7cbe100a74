"""Regenerate progressions that have pending reports.

One pass groups pending reports by progression, regenerates each reported
progression once, and resolves all of its reports together. A failing
group is logged and skipped; the remaining groups still run.
"""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from openai import OpenAI

from chordcraft.config import GenerationConfig
from chordcraft.generate import generate_progression
from chordcraft.models import Report, ReportStatus, utcnow
from chordcraft.output import banner, log, warn
from chordcraft.store import ProgressionStore

_run_lock = threading.Lock()


@dataclass
class RegenerationSummary:
    pending_reports: int = 0
    regenerated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    already_running: bool = False


def group_reports(reports: List[Report]) -> Dict[str, List[Report]]:
    """Reports keyed by progression id, in the order ids were first seen."""
    groups: Dict[str, List[Report]] = {}
    for report in reports:
        groups.setdefault(report.progression_id, []).append(report)
    return groups


def regenerate_group(
    store: ProgressionStore,
    client: OpenAI,
    cfg: GenerationConfig,
    progression_id: str,
    reports: List[Report],
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Regenerate one progression and resolve its reports.

    Returns False when the progression no longer exists.
    """
    progression = store.get_progression(progression_id)
    if progression is None:
        warn(f"Progression {progression_id} not found, skipping")
        return False

    now = now or utcnow()
    result = generate_progression(client, progression.params, cfg, rng)
    store.update_progression(
        progression_id,
        {
            "chords": result.chords,
            "insights": result.insights,
            "numerals": result.numerals,
            "reported": False,
            "reportReason": None,
            "reportedAt": None,
            "regeneratedAt": now,
        },
        increments={"regenerationCount": 1},
    )
    store.update_reports(
        [r.id for r in reports],
        {"status": ReportStatus.REGENERATED.value, "resolvedAt": now},
    )
    return True


def regenerate_reported(
    store: ProgressionStore,
    client: OpenAI,
    cfg: GenerationConfig,
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> RegenerationSummary:
    """Run one regeneration pass over all pending reports."""
    summary = RegenerationSummary()
    if not _run_lock.acquire(blocking=False):
        warn("A regeneration pass is already running in this process; skipping")
        summary.already_running = True
        return summary
    try:
        banner("Regenerating reported progressions")
        pending = store.list_reports(ReportStatus.PENDING)
        summary.pending_reports = len(pending)
        if not pending:
            log("No pending reports found")
            return summary
        log(f"Found {len(pending)} pending reports to process")

        for progression_id, reports in group_reports(pending).items():
            log(
                f"Processing progression {progression_id} "
                f"with {len(reports)} reports"
            )
            try:
                done = regenerate_group(
                    store, client, cfg, progression_id, reports,
                    rng=rng, now=now,
                )
            except Exception as e:
                warn(f"Error regenerating progression {progression_id}: {e}")
                summary.failed[progression_id] = str(e)
                continue
            if done:
                summary.regenerated.append(progression_id)
                log(f"Regenerated progression {progression_id}")
            else:
                summary.skipped.append(progression_id)

        log(
            f"Finished: {len(summary.regenerated)} regenerated, "
            f"{len(summary.skipped)} skipped, {len(summary.failed)} failed"
        )
        return summary
    finally:
        _run_lock.release()
