"""Extractor selection by dominant language."""

from collections import Counter
from typing import Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..history.dependencies import DependencyDiffAnalyzer
from ..history.message_parser import CommitParser
from ..history.models import Commit, Language
from .base import CommitExtractor
from .models import CommitExtraction
from .patterns import PatternStore
from .rules import LANGUAGE_RULES


class ExtractorRegistry:
    """One CommitExtractor per supported language, chosen per commit.

    Commits whose languages are too evenly split are tagged ``MIXED`` and
    handled by the default extractor. Commits with no source files at all
    also fall back to it, which yields an empty extraction.
    """

    def __init__(
        self,
        parser: Optional[CommitParser] = None,
        dependency_analyzer: Optional[DependencyDiffAnalyzer] = None,
        pattern_store: Optional[PatternStore] = None,
        thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
        default_language: Language = Language.TYPESCRIPT,
    ):
        parser = parser or CommitParser()
        dependency_analyzer = dependency_analyzer or DependencyDiffAnalyzer()
        self.thresholds = thresholds
        self._extractors: dict[Language, CommitExtractor] = {
            language: CommitExtractor(rules, parser, dependency_analyzer, pattern_store)
            for language, rules in LANGUAGE_RULES.items()
        }
        if default_language not in self._extractors:
            raise ValueError(f"No extractor for default language {default_language.value}")
        self.default_language = default_language

    @property
    def languages(self) -> list[Language]:
        return list(self._extractors)

    def get(self, language: Language) -> Optional[CommitExtractor]:
        return self._extractors.get(language)

    def primary_language(self, commit: Commit) -> Language:
        """Dominant source language of a commit.

        Returns ``OTHER`` when no source files changed and ``MIXED`` when
        several languages are present and the largest share is under
        ``mixed_language_ratio`` of all changed files.
        """
        counts = Counter(f.language for f in commit.files if f.language.is_source)
        if not counts:
            return Language.OTHER

        # most_common is stable, so ties keep first-seen order
        language, top = counts.most_common(1)[0]
        if len(counts) > 1 and top < len(commit.files) * self.thresholds.mixed_language_ratio:
            return Language.MIXED
        return language

    def extract(self, commit: Commit) -> CommitExtraction:
        language = self.primary_language(commit)
        extractor = self._extractors.get(language)
        if extractor is not None:
            return extractor.extract(commit)

        default = self._extractors[self.default_language]
        return default.extract(commit, primary_language=Language.MIXED)
