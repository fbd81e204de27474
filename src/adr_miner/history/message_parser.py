"""Commit message parsing: conventional commits, keywords, references.

The parser turns a subject/body pair into MessageSignals, typed hints that
a commit carries architectural intent. Keyword matching is case-insensitive
substring matching, so "api" also fires on "rapid". Callers treat signals as
hints, never as facts.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..categories import DecisionCategory


class SignalKind(Enum):
    KEYWORD = "keyword"
    PATTERN = "pattern"
    REFERENCE = "reference"
    BREAKING_CHANGE = "breaking-change"
    DEPRECATION = "deprecation"


@dataclass(frozen=True)
class MessageSignal:
    kind: SignalKind
    value: str
    confidence: float
    category_hint: Optional[DecisionCategory] = None


@dataclass(frozen=True)
class MessageReference:
    type: str  # "issue" | "pr" | "commit"
    id: str
    action: Optional[str] = None  # "fixes", "closes", ...


@dataclass
class ParsedMessage:
    subject: str
    body: str
    conventional_type: Optional[str] = None
    scope: Optional[str] = None
    is_breaking_change: bool = False
    footer_tokens: list[tuple[str, str]] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    references: list[MessageReference] = field(default_factory=list)


_CONVENTIONAL_RE = re.compile(r"^(\w+)(?:\(([^)]+)\))?(!)?:\s*(.+)$")

CONVENTIONAL_TYPES: dict[str, Optional[DecisionCategory]] = {
    "feat": DecisionCategory.PATTERN_INTRODUCTION,
    "fix": None,
    "docs": None,
    "style": None,
    "refactor": DecisionCategory.REFACTORING,
    "perf": DecisionCategory.PERFORMANCE_OPTIMIZATION,
    "test": DecisionCategory.TESTING_STRATEGY,
    "build": DecisionCategory.INFRASTRUCTURE,
    "ci": DecisionCategory.INFRASTRUCTURE,
    "chore": None,
    "revert": None,
}

# (keywords, category, weight)
KEYWORD_GROUPS: list[tuple[tuple[str, ...], DecisionCategory, float]] = [
    (
        ("migrate", "migration", "switch to", "adopt", "introduce", "add support for", "integrate"),
        DecisionCategory.TECHNOLOGY_ADOPTION,
        0.8,
    ),
    (
        ("remove", "deprecate", "drop support", "sunset", "phase out", "eliminate"),
        DecisionCategory.TECHNOLOGY_REMOVAL,
        0.7,
    ),
    (
        ("refactor", "restructure", "reorganize", "consolidate", "simplify", "extract", "inline"),
        DecisionCategory.REFACTORING,
        0.6,
    ),
    (
        ("architecture", "design", "pattern", "abstraction", "layer", "module", "component"),
        DecisionCategory.ARCHITECTURE_CHANGE,
        0.7,
    ),
    (
        ("api", "endpoint", "route", "interface", "contract", "schema", "breaking change"),
        DecisionCategory.API_CHANGE,
        0.7,
    ),
    (
        (
            "security",
            "auth",
            "authentication",
            "authorization",
            "permission",
            "encrypt",
            "vulnerability",
        ),
        DecisionCategory.SECURITY_ENHANCEMENT,
        0.8,
    ),
    (
        ("performance", "optimize", "speed", "cache", "lazy", "async", "parallel", "batch"),
        DecisionCategory.PERFORMANCE_OPTIMIZATION,
        0.6,
    ),
    (
        (
            "test strategy",
            "testing approach",
            "test framework",
            "coverage",
            "e2e",
            "integration test",
        ),
        DecisionCategory.TESTING_STRATEGY,
        0.5,
    ),
    (
        ("ci/cd", "pipeline", "deploy", "docker", "kubernetes", "terraform", "infrastructure"),
        DecisionCategory.INFRASTRUCTURE,
        0.6,
    ),
]

_BREAKING_INDICATORS = (
    "BREAKING CHANGE",
    "BREAKING-CHANGE",
    "BREAKING:",
    "!:",
    "INCOMPATIBLE",
    "BACKWARDS-INCOMPATIBLE",
)

_ACTION_REF_RE = re.compile(r"(close[sd]?|fix(?:e[sd])?|resolve[sd]?)\s+#(\d+)", re.IGNORECASE)
_ISSUE_REF_RE = re.compile(r"#(\d+)")
_URL_REF_RE = re.compile(r"https?://github\.com/[^/\s]+/[^/\s]+/(issues|pull)/(\d+)")
_COMMIT_REF_RE = re.compile(r"\b(?=[a-f]*\d)([a-f0-9]{7,40})\b")
_FOOTER_RE = re.compile(r"^([A-Z][A-Za-z-]+)(?::\s*|\s+#)(.+)$")


class CommitParser:
    """Extract semantic hints from commit messages."""

    def parse(self, subject: str, body: str = "") -> ParsedMessage:
        message = f"{subject}\n\n{body}" if body else subject
        parsed = ParsedMessage(subject=subject, body=body)

        match = _CONVENTIONAL_RE.match(subject)
        conventional_breaking = False
        if match and match.group(1).lower() in CONVENTIONAL_TYPES:
            parsed.conventional_type = match.group(1).lower()
            parsed.scope = match.group(2)
            conventional_breaking = bool(match.group(3))

        upper = message.upper()
        parsed.is_breaking_change = conventional_breaking or any(
            indicator in upper for indicator in _BREAKING_INDICATORS
        )

        for line in body.split("\n"):
            footer = _FOOTER_RE.match(line)
            if footer:
                parsed.footer_tokens.append((footer.group(1), footer.group(2).strip()))

        parsed.keywords = list(dict.fromkeys(kw for kw, _, _ in self._matched_keywords(message)))
        parsed.references = self._parse_references(message)
        return parsed

    def extract_signals(self, subject: str, body: str = "") -> list[MessageSignal]:
        parsed = self.parse(subject, body)
        message = f"{subject}\n\n{body}" if body else subject
        signals = []

        if parsed.conventional_type:
            hint = CONVENTIONAL_TYPES[parsed.conventional_type]
            if hint is not None:
                signals.append(
                    MessageSignal(
                        SignalKind.PATTERN, f"conventional:{parsed.conventional_type}", 0.7, hint
                    )
                )

        if parsed.is_breaking_change:
            signals.append(
                MessageSignal(
                    SignalKind.BREAKING_CHANGE, "breaking-change", 0.9, DecisionCategory.API_CHANGE
                )
            )

        for keyword, category, weight in self._matched_keywords(message):
            signals.append(MessageSignal(SignalKind.KEYWORD, keyword, weight, category))

        for ref in parsed.references:
            signals.append(MessageSignal(SignalKind.REFERENCE, f"{ref.type}:{ref.id}", 0.5))

        if "deprecat" in message.lower():
            signals.append(
                MessageSignal(
                    SignalKind.DEPRECATION,
                    "deprecation",
                    0.8,
                    DecisionCategory.TECHNOLOGY_REMOVAL,
                )
            )

        return signals

    @staticmethod
    def _matched_keywords(message: str):
        lower = message.lower()
        for keywords, category, weight in KEYWORD_GROUPS:
            for keyword in keywords:
                if keyword in lower:
                    yield keyword, category, weight

    @staticmethod
    def _parse_references(message: str) -> list[MessageReference]:
        references = []
        seen = set()

        def add(ref_type: str, ref_id: str, action: Optional[str] = None) -> None:
            key = (ref_type, ref_id)
            if key not in seen:
                seen.add(key)
                references.append(MessageReference(ref_type, ref_id, action))

        for m in _ACTION_REF_RE.finditer(message):
            add("issue", m.group(2), m.group(1).lower())
        for m in _ISSUE_REF_RE.finditer(message):
            add("issue", m.group(1))
        for m in _URL_REF_RE.finditer(message):
            add("pr" if m.group(1) == "pull" else "issue", m.group(2))
        for m in _COMMIT_REF_RE.finditer(message):
            add("commit", m.group(1))
        return references
