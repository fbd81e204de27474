"""JSON-file decision store.

Layout under the project root::

    .adr-miner/decisions/
        index.json          ids, by-status and by-category id lists, summary
        DEC-1A2B3C4.json    one record per decision

Records are plain dicts in the shape produced by ``decision_to_dict``.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..categories import DecisionCategory
from ..exceptions import DecisionNotFoundError, InvalidStatusTransitionError, StorageError
from ..logging_config import get_logger
from ..mining.models import MiningResult
from ..serializers import decision_to_dict, result_to_dict
from ..synthesis.models import DecisionStatus
from .markdown import export_markdown, slugify

logger = get_logger(__name__)

INDEX_VERSION = "1.0.0"

ALLOWED_TRANSITIONS: dict[DecisionStatus, frozenset[DecisionStatus]] = {
    DecisionStatus.DRAFT: frozenset(
        {DecisionStatus.CONFIRMED, DecisionStatus.REJECTED, DecisionStatus.SUPERSEDED}
    ),
    DecisionStatus.CONFIRMED: frozenset({DecisionStatus.SUPERSEDED}),
}

# Fields a curator owns; a re-mine never overwrites them once a decision left draft
_CURATION_FIELDS = ("status", "confirmed_by", "notes", "last_updated")


class DecisionStore:
    """Persist mined decisions and track their curation status.

    Example:
        >>> store = DecisionStore("/path/to/repo")
        >>> store.save_result(result)
        >>> store.update_status("DEC-1A2B3C4", DecisionStatus.CONFIRMED, confirmed_by="alice")
    """

    def __init__(self, root_dir: str | Path = ".", decisions_dir: str = ".adr-miner"):
        self.root_dir = Path(root_dir)
        self.decisions_path = self.root_dir / decisions_dir / "decisions"
        self.index_path = self.decisions_path / "index.json"

    def exists(self) -> bool:
        return self.index_path.is_file()

    # ── Writing ──────────────────────────────────────────────────────

    def save_result(self, result: MiningResult) -> list[str]:
        """Write every decision of a run and rebuild the index.

        Decisions that were confirmed, rejected or superseded earlier keep their
        curation fields, and stay indexed even if this run did not find them
        again. Drafts from earlier runs that were not found again are removed.

        Returns:
            Ids of the decisions written by this run
        """
        self.decisions_path.mkdir(parents=True, exist_ok=True)
        previous_ids = self._index_ids() if self.exists() else []

        written: list[str] = []
        for decision in result.decisions:
            record = decision_to_dict(decision)
            previous = self._read_record(decision.id)
            if previous is not None and previous.get("status") != DecisionStatus.DRAFT.value:
                for key in _CURATION_FIELDS:
                    if key in previous:
                        record[key] = previous[key]
            self._write_json(self._record_path(decision.id), record)
            written.append(decision.id)

        ids = list(written)
        for old_id in previous_ids:
            if old_id in ids:
                continue
            previous = self._read_record(old_id)
            if previous is None:
                continue
            if previous.get("status") == DecisionStatus.DRAFT.value:
                self._record_path(old_id).unlink()
                logger.debug("Removed stale draft %s", old_id)
            else:
                ids.append(old_id)

        self._write_index(ids, result_to_dict(result)["summary"])
        logger.info("Saved %d decisions to %s", len(written), self.decisions_path)
        return written

    def update_status(
        self,
        decision_id: str,
        status: DecisionStatus,
        confirmed_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> dict[str, Any]:
        """Move a decision to ``status`` and re-index.

        Raises:
            DecisionNotFoundError: If no record exists for ``decision_id``
            InvalidStatusTransitionError: If the move is not allowed from the
                current status
        """
        record = self.load(decision_id)
        current = DecisionStatus(record.get("status", DecisionStatus.DRAFT.value))
        if status not in ALLOWED_TRANSITIONS.get(current, frozenset()):
            raise InvalidStatusTransitionError(record["id"], current.value, status.value)

        record["status"] = status.value
        record["last_updated"] = datetime.now().isoformat()
        if confirmed_by is not None:
            record["confirmed_by"] = confirmed_by
        if notes is not None:
            record["notes"] = notes
        self._write_json(self._record_path(record["id"]), record)

        index = self.load_index()
        self._write_index(index["decision_ids"], index.get("summary", {}))
        logger.info("%s: %s -> %s", record["id"], current.value, status.value)
        return record

    # ── Reading ──────────────────────────────────────────────────────

    def load_index(self) -> dict[str, Any]:
        if not self.exists():
            raise StorageError(
                "No mined decisions found; run 'adr-miner mine' first",
                details={"path": str(self.index_path)},
            )
        return self._read_json(self.index_path)

    def load(self, decision_id: str) -> dict[str, Any]:
        record = self._read_record(decision_id.upper())
        if record is None:
            raise DecisionNotFoundError(decision_id)
        return record

    def list(
        self,
        category: Optional[DecisionCategory] = None,
        status: Optional[DecisionStatus] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Stored decisions, highest confidence first, optionally filtered."""
        records = []
        for decision_id in self.load_index()["decision_ids"]:
            record = self._read_record(decision_id)
            if record is None:
                logger.warning("Index lists %s but its record is missing", decision_id)
                continue
            if category is not None and record.get("category") != category.value:
                continue
            if status is not None and record.get("status") != status.value:
                continue
            records.append(record)

        records.sort(key=lambda r: (-float(r.get("confidence_score", 0.0)), r["id"]))
        return records[:limit] if limit is not None else records

    def for_file(self, path: str) -> list[dict[str, Any]]:
        """Stored decisions whose cluster touched ``path``.

        ``path`` matches a recorded file exactly, as a directory containing
        it, or as a longer path (absolute or repo-prefixed) ending in it.
        """
        query = path.replace("\\", "/").strip()
        while query.startswith("./"):
            query = query[2:]
        query = query.rstrip("/")
        if not query:
            return []

        def touches(affected: str) -> bool:
            return (
                affected == query
                or affected.startswith(query + "/")
                or query.endswith("/" + affected)
            )

        return [
            r for r in self.list()
            if any(touches(f) for f in r.get("cluster", {}).get("files_affected", []))
        ]

    def timeline(self, limit: Optional[int] = None) -> list[dict[str, Any]]:
        """Stored decisions, most recently finished first."""
        records = self.list()
        records.sort(key=lambda r: r["id"])
        records.sort(key=lambda r: datetime.fromisoformat(r["date_range"]["end"]), reverse=True)
        return records[:limit] if limit is not None else records

    # ── Export ───────────────────────────────────────────────────────

    def export_adrs(self, out_dir: Optional[str | Path] = None) -> list[Path]:
        """Write every stored decision as ``NNNN-<slug>.md``, numbered in date order.

        Args:
            out_dir: Target directory (default: ``<root>/docs/adr``)
        """
        target = Path(out_dir) if out_dir is not None else self.root_dir / "docs" / "adr"
        target.mkdir(parents=True, exist_ok=True)

        records = self.list()
        records.sort(key=lambda r: ((r.get("date_range") or {}).get("start", ""), r["id"]))

        written = []
        for number, record in enumerate(records, start=1):
            path = target / f"{number:04d}-{slugify(record['title'])}.md"
            path.write_text(export_markdown(record), encoding="utf-8")
            written.append(path)
        logger.info("Exported %d ADRs to %s", len(written), target)
        return written

    # ── Internals ────────────────────────────────────────────────────

    def _record_path(self, decision_id: str) -> Path:
        return self.decisions_path / f"{decision_id}.json"

    def _index_ids(self) -> list[str]:
        return list(self.load_index().get("decision_ids", []))

    def _read_record(self, decision_id: str) -> Optional[dict[str, Any]]:
        path = self._record_path(decision_id)
        if not path.is_file():
            return None
        return self._read_json(path)

    def _write_index(self, ids: list[str], summary: dict[str, Any]) -> None:
        records = [r for r in (self._read_record(i) for i in ids) if r is not None]

        by_status = {s.value: [] for s in DecisionStatus}
        by_category = {c.value: [] for c in DecisionCategory}
        for record in records:
            by_status.setdefault(record["status"], []).append(record["id"])
            by_category.setdefault(record["category"], []).append(record["id"])

        summary = dict(summary)
        summary["by_status"] = {status: len(members) for status, members in by_status.items()}

        index = {
            "version": INDEX_VERSION,
            "decision_ids": [r["id"] for r in records],
            "by_status": by_status,
            "by_category": by_category,
            "summary": summary,
            "last_updated": datetime.now().isoformat(),
        }
        self._write_json(self.index_path, index)

    @staticmethod
    def _read_json(path: Path) -> dict[str, Any]:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {path.name}: {e}", details={"path": str(path)}) from e

    @staticmethod
    def _write_json(path: Path, data: dict[str, Any]) -> None:
        try:
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {path.name}: {e}", details={"path": str(path)}) from e
