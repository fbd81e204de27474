"""Decision categories shared by the message parser and the synthesizer."""

from enum import Enum


class DecisionCategory(Enum):
    """Kind of architectural decision.

    Declaration order is the tie-break order when category votes are equal.
    """

    TECHNOLOGY_ADOPTION = "technology-adoption"
    TECHNOLOGY_REMOVAL = "technology-removal"
    PATTERN_INTRODUCTION = "pattern-introduction"
    PATTERN_MIGRATION = "pattern-migration"
    ARCHITECTURE_CHANGE = "architecture-change"
    API_CHANGE = "api-change"
    SECURITY_ENHANCEMENT = "security-enhancement"
    PERFORMANCE_OPTIMIZATION = "performance-optimization"
    REFACTORING = "refactoring"
    TESTING_STRATEGY = "testing-strategy"
    INFRASTRUCTURE = "infrastructure"
    OTHER = "other"
