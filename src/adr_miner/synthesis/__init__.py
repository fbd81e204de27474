"""Decision synthesis: category inference, ADR text, confidence and evidence."""

from ..categories import DecisionCategory
from .models import (
    ADR,
    ConfidenceLevel,
    Decision,
    DecisionStatus,
    Evidence,
    EvidenceType,
    Reference,
)
from .synthesizer import DecisionSynthesizer, confidence_level, infer_category, score_confidence
from .tables import CATEGORY_VERB, SIGNAL_CATEGORY

__all__ = [
    "ADR",
    "CATEGORY_VERB",
    "ConfidenceLevel",
    "Decision",
    "DecisionCategory",
    "DecisionStatus",
    "DecisionSynthesizer",
    "Evidence",
    "EvidenceType",
    "Reference",
    "SIGNAL_CATEGORY",
    "confidence_level",
    "infer_category",
    "score_confidence",
]
