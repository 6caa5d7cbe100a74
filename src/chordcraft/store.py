"""Persistent store interface plus in-memory, JSON-file and Firestore adapters.

Field names passed to ``update_progression`` / ``update_reports`` and
``query_progressions`` are document (camelCase) names.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from chordcraft.errors import ConfigurationError, PersistenceError
from chordcraft.models import Progression, Report, ReportStatus

PROGRESSIONS_COLLECTION = "progressions"
REPORTS_COLLECTION = "reports"

# Firestore rejects batches with more writes than this.
MAX_BATCH_WRITES = 500


class ProgressionStore(Protocol):
    def list_progressions(self) -> List[Progression]: ...
    def get_progression(self, progression_id: str) -> Optional[Progression]: ...
    def query_progressions(self, field: str, value: Any) -> List[Progression]: ...
    def add_progression(self, progression: Progression) -> str: ...
    def update_progression(
        self,
        progression_id: str,
        fields: Dict[str, Any],
        increments: Optional[Dict[str, int]] = None,
    ) -> None: ...
    def delete_progressions(self, progression_ids: List[str]) -> None: ...
    def clear_progressions(self) -> int: ...
    def list_reports(self, status: Optional[ReportStatus] = None) -> List[Report]: ...
    def get_report(self, report_id: str) -> Optional[Report]: ...
    def add_report(self, report: Report) -> str: ...
    def update_reports(self, report_ids: List[str], fields: Dict[str, Any]) -> None: ...
    def clear_reports(self) -> int: ...


def new_id() -> str:
    return uuid.uuid4().hex[:20]


class InMemoryStore:
    """Dict-backed store; every read returns fresh record objects."""

    def __init__(self) -> None:
        self._progressions: Dict[str, Dict[str, Any]] = {}
        self._reports: Dict[str, Dict[str, Any]] = {}

    def _changed(self) -> None:
        """Hook called after every committed write."""

    # -- progressions --

    def list_progressions(self) -> List[Progression]:
        return [
            Progression.from_document(pid, dict(doc))
            for pid, doc in self._progressions.items()
        ]

    def get_progression(self, progression_id: str) -> Optional[Progression]:
        doc = self._progressions.get(progression_id)
        if doc is None:
            return None
        return Progression.from_document(progression_id, dict(doc))

    def query_progressions(self, field: str, value: Any) -> List[Progression]:
        return [
            Progression.from_document(pid, dict(doc))
            for pid, doc in self._progressions.items()
            if doc.get(field) == value
        ]

    def add_progression(self, progression: Progression) -> str:
        progression.id = progression.id or new_id()
        self._progressions[progression.id] = progression.to_document()
        self._changed()
        return progression.id

    def update_progression(
        self,
        progression_id: str,
        fields: Dict[str, Any],
        increments: Optional[Dict[str, int]] = None,
    ) -> None:
        doc = self._progressions.get(progression_id)
        if doc is None:
            raise PersistenceError(f"Progression {progression_id} not found.")
        doc.update(fields)
        for name, amount in (increments or {}).items():
            doc[name] = (doc.get(name) or 0) + amount
        self._changed()

    def delete_progressions(self, progression_ids: List[str]) -> None:
        for pid in progression_ids:
            self._progressions.pop(pid, None)
        self._changed()

    def clear_progressions(self) -> int:
        n = len(self._progressions)
        self._progressions.clear()
        self._changed()
        return n

    # -- reports --

    def list_reports(self, status: Optional[ReportStatus] = None) -> List[Report]:
        return [
            Report.from_document(rid, dict(doc))
            for rid, doc in self._reports.items()
            if status is None or doc.get("status") == status.value
        ]

    def get_report(self, report_id: str) -> Optional[Report]:
        doc = self._reports.get(report_id)
        if doc is None:
            return None
        return Report.from_document(report_id, dict(doc))

    def add_report(self, report: Report) -> str:
        report.id = report.id or new_id()
        self._reports[report.id] = report.to_document()
        self._changed()
        return report.id

    def update_reports(self, report_ids: List[str], fields: Dict[str, Any]) -> None:
        missing = [rid for rid in report_ids if rid not in self._reports]
        if missing:
            raise PersistenceError(f"Reports not found: {', '.join(missing)}")
        for rid in report_ids:
            self._reports[rid].update(fields)
        self._changed()

    def clear_reports(self) -> int:
        n = len(self._reports)
        self._reports.clear()
        self._changed()
        return n


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"__datetime__": value.isoformat()}
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _decode(obj: Dict[str, Any]) -> Any:
    if set(obj) == {"__datetime__"}:
        return datetime.fromisoformat(obj["__datetime__"])
    return obj


class JsonFileStore(InMemoryStore):
    """In-memory store persisted to a single JSON file after each write."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        if path.exists():
            try:
                data = json.loads(
                    path.read_text(encoding="utf-8"), object_hook=_decode
                )
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceError(f"Cannot read store file {path}: {e}") from e
            self._progressions = dict(data.get(PROGRESSIONS_COLLECTION, {}))
            self._reports = dict(data.get(REPORTS_COLLECTION, {}))

    def _changed(self) -> None:
        payload = {
            PROGRESSIONS_COLLECTION: self._progressions,
            REPORTS_COLLECTION: self._reports,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, indent=2, default=_encode), encoding="utf-8"
            )
        except OSError as e:
            raise PersistenceError(f"Cannot write store file {self.path}: {e}") from e


def _chunks(items: List[Any], size: int) -> Iterable[List[Any]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


class FirestoreStore:
    """Google Cloud Firestore adapter (``pip install chordcraft[firestore]``)."""

    def __init__(self, project: Optional[str] = None, client: Optional[Any] = None) -> None:
        try:
            from google.api_core.exceptions import GoogleAPIError
            from google.cloud import firestore
        except ImportError as exc:
            raise ConfigurationError(
                "google-cloud-firestore is not installed; "
                "install the 'firestore' extra or use --store-file."
            ) from exc
        if client is None and not project:
            raise ConfigurationError(
                "A GCP project is required for the Firestore store "
                "(--project or GOOGLE_CLOUD_PROJECT)."
            )
        self._firestore = firestore
        self._api_error = GoogleAPIError
        self._client = client or firestore.Client(project=project)

    def _col(self, name: str):  # type: ignore[no-untyped-def]
        return self._client.collection(name)

    def _call(self, what: str, fn, *args, **kwargs):  # type: ignore[no-untyped-def]
        try:
            return fn(*args, **kwargs)
        except self._api_error as e:
            raise PersistenceError(f"Firestore {what} failed: {e}") from e

    def list_progressions(self) -> List[Progression]:
        docs = self._call("read", lambda: list(self._col(PROGRESSIONS_COLLECTION).stream()))
        return [Progression.from_document(d.id, d.to_dict()) for d in docs]

    def get_progression(self, progression_id: str) -> Optional[Progression]:
        snap = self._call("read", self._col(PROGRESSIONS_COLLECTION).document(progression_id).get)
        if not snap.exists:
            return None
        return Progression.from_document(snap.id, snap.to_dict())

    def query_progressions(self, field: str, value: Any) -> List[Progression]:
        query = self._col(PROGRESSIONS_COLLECTION).where(field, "==", value)
        docs = self._call("query", lambda: list(query.stream()))
        return [Progression.from_document(d.id, d.to_dict()) for d in docs]

    def add_progression(self, progression: Progression) -> str:
        ref = self._col(PROGRESSIONS_COLLECTION).document(progression.id or None)
        self._call("write", ref.set, progression.to_document())
        progression.id = ref.id
        return ref.id

    def update_progression(
        self,
        progression_id: str,
        fields: Dict[str, Any],
        increments: Optional[Dict[str, int]] = None,
    ) -> None:
        changes = dict(fields)
        for name, amount in (increments or {}).items():
            changes[name] = self._firestore.Increment(amount)
        ref = self._col(PROGRESSIONS_COLLECTION).document(progression_id)
        self._call("update", ref.update, changes)

    def delete_progressions(self, progression_ids: List[str]) -> None:
        batch = self._client.batch()
        for pid in progression_ids:
            batch.delete(self._col(PROGRESSIONS_COLLECTION).document(pid))
        self._call("batch delete", batch.commit)

    def _clear(self, collection: str) -> int:
        refs = self._call(
            "read", lambda: [d.reference for d in self._col(collection).stream()]
        )
        for chunk in _chunks(refs, MAX_BATCH_WRITES):
            batch = self._client.batch()
            for ref in chunk:
                batch.delete(ref)
            self._call("batch delete", batch.commit)
        return len(refs)

    def clear_progressions(self) -> int:
        return self._clear(PROGRESSIONS_COLLECTION)

    def list_reports(self, status: Optional[ReportStatus] = None) -> List[Report]:
        query = self._col(REPORTS_COLLECTION)
        if status is not None:
            query = query.where("status", "==", status.value)
        docs = self._call("query", lambda: list(query.stream()))
        return [Report.from_document(d.id, d.to_dict()) for d in docs]

    def get_report(self, report_id: str) -> Optional[Report]:
        snap = self._call("read", self._col(REPORTS_COLLECTION).document(report_id).get)
        if not snap.exists:
            return None
        return Report.from_document(snap.id, snap.to_dict())

    def add_report(self, report: Report) -> str:
        ref = self._col(REPORTS_COLLECTION).document(report.id or None)
        self._call("write", ref.set, report.to_document())
        report.id = ref.id
        return ref.id

    def update_reports(self, report_ids: List[str], fields: Dict[str, Any]) -> None:
        batch = self._client.batch()
        for rid in report_ids:
            batch.update(self._col(REPORTS_COLLECTION).document(rid), fields)
        self._call("batch update", batch.commit)

    def clear_reports(self) -> int:
        return self._clear(REPORTS_COLLECTION)
