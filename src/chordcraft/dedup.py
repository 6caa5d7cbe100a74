"""Find duplicate progressions and keep the highest-scoring copy of each.

A run works on one snapshot of the store taken when it starts; progressions
inserted afterwards are not seen. Duplicates share the same content key
(key, scale and ordered chord names). The plan is computed the same way for
dry runs and real runs, and deletions are committed in sequential batches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from chordcraft.errors import PersistenceError
from chordcraft.models import Progression
from chordcraft.output import log, warn
from chordcraft.scoring import quality_score
from chordcraft.store import MAX_BATCH_WRITES, ProgressionStore


def content_key(progression: Progression) -> str:
    return "|".join([progression.key, progression.scale, *progression.chords])


@dataclass
class DuplicateGroup:
    key: str
    keep: Progression
    keep_score: float
    delete: List[Progression]
    delete_scores: List[float]


@dataclass
class DedupPlan:
    total: int
    groups: List[DuplicateGroup] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        return sum(1 + len(g.delete) for g in self.groups)

    @property
    def delete_ids(self) -> List[str]:
        return [p.id for g in self.groups for p in g.delete]

    @property
    def retained_ids(self) -> Dict[str, str]:
        return {g.key: g.keep.id for g in self.groups}


@dataclass
class DedupReport:
    plan: DedupPlan
    dry_run: bool
    deleted_ids: List[str] = field(default_factory=list)
    batches_committed: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def group_duplicates(snapshot: List[Progression]) -> Dict[str, List[Progression]]:
    """Groups of more than one progression sharing a content key, scan order."""
    groups: Dict[str, List[Progression]] = {}
    for progression in snapshot:
        groups.setdefault(content_key(progression), []).append(progression)
    return {k: v for k, v in groups.items() if len(v) > 1}


def plan_deduplication(snapshot: List[Progression]) -> DedupPlan:
    """Decide which member of every duplicate group survives."""
    plan = DedupPlan(total=len(snapshot))
    for key, members in group_duplicates(snapshot).items():
        scored = [(quality_score(p), p) for p in members]
        # sorted() is stable, so equal scores keep scan order.
        scored = sorted(scored, key=lambda sp: sp[0], reverse=True)
        plan.groups.append(
            DuplicateGroup(
                key=key,
                keep=scored[0][1],
                keep_score=scored[0][0],
                delete=[p for _, p in scored[1:]],
                delete_scores=[s for s, _ in scored[1:]],
            )
        )
    return plan


def _describe(plan: DedupPlan) -> None:
    for group in plan.groups:
        log("\n" + "-" * 24)
        log(f"Duplicate set: {group.key[:50]}...")
        log(f"Found {1 + len(group.delete)} duplicates")
        log(f"Keeping: {group.keep.id} (quality: {group.keep_score:.1f})")
        log("Deleting:")
        for p, score in zip(group.delete, group.delete_scores):
            log(f"  - {p.id} (quality: {score:.1f})")


def deduplicate(
    store: ProgressionStore,
    *,
    dry_run: bool = False,
    batch_size: int = MAX_BATCH_WRITES,
    verbose: bool = False,
) -> DedupReport:
    """Delete every lower-scoring duplicate, or only report them on a dry run.

    A failed batch commit stops the run; the report lists what was deleted
    before the failure.
    """
    if batch_size < 1 or batch_size > MAX_BATCH_WRITES:
        raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_WRITES}.")

    snapshot = store.list_progressions()
    log(f"Found {len(snapshot)} total progressions")
    plan = plan_deduplication(snapshot)
    report = DedupReport(plan=plan, dry_run=dry_run)

    log(f"Found {len(plan.groups)} groups of duplicate progressions")
    log(f"Total duplicates: {plan.duplicate_count}")
    log(f"Progressions to delete: {len(plan.delete_ids)}")
    if verbose:
        _describe(plan)

    if dry_run or not plan.groups:
        return report

    ids = plan.delete_ids
    for start in range(0, len(ids), batch_size):
        batch = ids[start : start + batch_size]
        try:
            store.delete_progressions(batch)
        except PersistenceError as e:
            report.error = str(e)
            warn(
                f"Batch {report.batches_committed + 1} failed; stopping after "
                f"{len(report.deleted_ids)} deletions: {e}"
            )
            break
        report.deleted_ids.extend(batch)
        report.batches_committed += 1
        log(f"Committed batch of {len(batch)} deletions")
    return report
