"""Convert pipeline objects to JSON-ready structures."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .mining.models import MiningResult
    from .synthesis.models import Decision


def to_jsonable(obj: Any) -> Any:
    """Convert object to JSON-serializable form."""
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(to_jsonable(x) for x in obj)
    if isinstance(obj, Path):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    return str(obj)


def _date_range(value) -> dict[str, str] | None:
    if value is None:
        return None
    start, end = value
    return {"start": start.isoformat(), "end": end.isoformat()}


def decision_to_dict(decision: Decision) -> dict[str, Any]:
    """Full decision record, including its cluster and derived fields."""
    data = to_jsonable(decision)
    data["date_range"] = _date_range(decision.date_range)
    data["duration"] = decision.duration
    data["patterns_changed"] = to_jsonable(decision.patterns_changed)
    data["dependencies_changed"] = to_jsonable(decision.dependencies_changed)
    data["cluster"]["date_range"] = _date_range(decision.cluster.date_range)
    return data


def result_to_dict(result: MiningResult) -> dict[str, Any]:
    summary = to_jsonable(result.summary)
    summary["date_range"] = _date_range(result.summary.date_range)
    summary["top_patterns"] = [
        {"pattern": name, "count": count} for name, count in result.summary.top_patterns
    ]
    summary["top_dependencies"] = [
        {"dependency": name, "count": count} for name, count in result.summary.top_dependencies
    ]
    return {
        "decisions": [decision_to_dict(d) for d in result.decisions],
        "summary": summary,
        "rejected_clusters": [
            {"id": c.id, "commits": [commit.hash for commit in c.commits]}
            for c in result.rejected_clusters
        ],
        "errors": to_jsonable(result.errors),
        "warnings": list(result.warnings),
    }
