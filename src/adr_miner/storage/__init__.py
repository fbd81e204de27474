"""Decision persistence and ADR export."""

from .markdown import export_markdown, slugify
from .store import ALLOWED_TRANSITIONS, DecisionStore

__all__ = ["ALLOWED_TRANSITIONS", "DecisionStore", "export_markdown", "slugify"]
