"""Report intake and dismissal."""

from __future__ import annotations

from typing import List

from chordcraft.errors import PersistenceError
from chordcraft.models import Progression, Report, ReportStatus, utcnow
from chordcraft.output import log
from chordcraft.store import ProgressionStore


def submit_report(
    store: ProgressionStore,
    progression_id: str,
    reason: str,
    details: str = "",
) -> Report:
    """Record a pending report and flag the progression it targets."""
    if store.get_progression(progression_id) is None:
        raise PersistenceError(f"Progression {progression_id} not found.")
    now = utcnow()
    report = Report(
        progression_id=progression_id,
        reason=reason,
        details=details,
        created_at=now,
    )
    store.add_report(report)
    store.update_progression(
        progression_id,
        {"reported": True, "reportReason": reason, "reportedAt": now},
        increments={"flags": 1},
    )
    log(f"Report {report.id} submitted for progression {progression_id}")
    return report


def dismiss_report(store: ProgressionStore, report_id: str) -> None:
    """Close a report without regenerating its progression."""
    report = store.get_report(report_id)
    if report is None:
        raise PersistenceError(f"Report {report_id} not found.")
    store.update_reports(
        [report_id],
        {"status": ReportStatus.DISMISSED.value, "resolvedAt": utcnow()},
    )
    log(f"Report {report_id} dismissed")


def list_reported(store: ProgressionStore) -> List[Progression]:
    return store.query_progressions("reported", True)
