"""Render stored decision records as ADR markdown documents."""

import re
from typing import Any, Optional

_MAX_SLUG = 50
_MAX_COMMITS = 10


def slugify(text: str, max_length: int = _MAX_SLUG) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "decision"


def _day(timestamp: Optional[str]) -> str:
    return timestamp[:10] if timestamp else "unknown"


def export_markdown(decision: dict[str, Any]) -> str:
    """Render one stored decision record (as written by DecisionStore) as an ADR.

    Sections: header fields, Context, Decision, Consequences, Evidence,
    References and Related Commits. Curation notes are appended when present.
    """
    adr = decision.get("adr", {})
    date_range = decision.get("date_range") or {}
    score = float(decision.get("confidence_score", 0.0))

    lines = [
        f"# {decision['id']}: {decision['title']}",
        "",
        f"**Status:** {decision.get('status', 'draft')}",
        f"**Category:** {decision.get('category', 'other')}",
        f"**Confidence:** {decision.get('confidence', 'low')} ({score * 100:.0f}%)",
        f"**Date:** {_day(date_range.get('start'))} - {_day(date_range.get('end'))}",
    ]
    if decision.get("confirmed_by"):
        lines.append(f"**Confirmed by:** {decision['confirmed_by']}")
    if decision.get("tags"):
        lines.append(f"**Tags:** {', '.join(decision['tags'])}")

    lines += ["", "## Context", "", adr.get("context", ""), ""]
    lines += ["## Decision", "", adr.get("decision", ""), ""]

    lines += ["## Consequences", ""]
    lines += [f"- {c}" for c in adr.get("consequences", [])]
    lines.append("")

    evidence = adr.get("evidence", [])
    if evidence:
        lines += ["## Evidence", ""]
        lines += [f"- **{e['type']}**: {e['description']}" for e in evidence]
        lines.append("")

    external = [r for r in adr.get("references", []) if r.get("type") != "commit"]
    if external:
        lines += ["## References", ""]
        for ref in external:
            label = "Pull request" if ref["type"] == "pr" else "Issue"
            lines.append(f"- {label} #{ref['id']}")
        lines.append("")

    commits = decision.get("cluster", {}).get("commits", [])
    if commits:
        lines += ["## Related Commits", ""]
        lines += [f"- `{c['short_hash']}` {c['subject']}" for c in commits[:_MAX_COMMITS]]
        if len(commits) > _MAX_COMMITS:
            lines.append(f"- ... and {len(commits) - _MAX_COMMITS} more")
        lines.append("")

    if decision.get("notes"):
        lines += ["## Notes", "", decision["notes"], ""]

    lines += ["---", f"*Mined by adr-miner on {_day(decision.get('mined_at'))}*", ""]
    return "\n".join(lines)
