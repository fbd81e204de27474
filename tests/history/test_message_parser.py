"""Tests for history/message_parser.py - commit message signals."""

from adr_miner.categories import DecisionCategory
from adr_miner.history.message_parser import CommitParser, SignalKind


def _by_kind(signals, kind):
    return [s for s in signals if s.kind == kind]


class TestParse:
    """Test CommitParser.parse."""

    def setup_method(self):
        self.parser = CommitParser()

    def test_conventional_commit(self):
        """Type and scope are read from a conventional subject."""
        parsed = self.parser.parse("feat(auth): add login flow")
        assert parsed.conventional_type == "feat"
        assert parsed.scope == "auth"
        assert not parsed.is_breaking_change

    def test_bang_marks_breaking(self):
        parsed = self.parser.parse("refactor(api)!: drop v1 endpoints")
        assert parsed.conventional_type == "refactor"
        assert parsed.is_breaking_change

    def test_breaking_footer(self):
        parsed = self.parser.parse("Rework config", "BREAKING CHANGE: keys renamed")
        assert parsed.is_breaking_change

    def test_unknown_prefix_is_not_conventional(self):
        parsed = self.parser.parse("wip: something")
        assert parsed.conventional_type is None

    def test_references(self):
        """Issue numbers, closing keywords and GitHub URLs are collected once each."""
        parsed = self.parser.parse(
            "Fix crash on startup",
            "Closes #12, see #12 and https://github.com/acme/app/pull/40",
        )
        refs = {(r.type, r.id) for r in parsed.references}
        assert ("issue", "12") in refs
        assert ("pr", "40") in refs
        closing = [r for r in parsed.references if r.action]
        assert closing[0].action == "closes"
        assert len([r for r in parsed.references if r.id == "12"]) == 1

    def test_commit_reference_needs_a_digit(self):
        """Plain words made of hex letters are not commit hashes."""
        parsed = self.parser.parse("Revert deadbeefcafe", "")
        assert not [r for r in parsed.references if r.type == "commit"]
        parsed = self.parser.parse("Revert 1a2b3c4d", "")
        assert [r.id for r in parsed.references if r.type == "commit"] == ["1a2b3c4d"]

    def test_footer_tokens(self):
        parsed = self.parser.parse("feat: x", "Reviewed-by: Bob\nRefs #7")
        assert ("Reviewed-by", "Bob") in parsed.footer_tokens
        assert ("Refs", "7") in parsed.footer_tokens


class TestExtractSignals:
    """Test CommitParser.extract_signals."""

    def setup_method(self):
        self.parser = CommitParser()

    def test_conventional_type_hint(self):
        """A mapped conventional type yields a pattern signal at 0.7."""
        signals = self.parser.extract_signals("perf: speed up queries")
        pattern = _by_kind(signals, SignalKind.PATTERN)
        assert len(pattern) == 1
        assert pattern[0].confidence == 0.7
        assert pattern[0].category_hint == DecisionCategory.PERFORMANCE_OPTIMIZATION

    def test_unmapped_conventional_type_has_no_pattern_signal(self):
        signals = self.parser.extract_signals("chore: bump version")
        assert not _by_kind(signals, SignalKind.PATTERN)

    def test_keywords(self):
        """Each matched keyword becomes its own signal with the group weight."""
        signals = self.parser.extract_signals("Migrate sessions to redis cache")
        keywords = {s.value: s for s in _by_kind(signals, SignalKind.KEYWORD)}
        assert keywords["migrate"].category_hint == DecisionCategory.TECHNOLOGY_ADOPTION
        assert keywords["migrate"].confidence == 0.8
        assert keywords["cache"].category_hint == DecisionCategory.PERFORMANCE_OPTIMIZATION

    def test_breaking_change_signal(self):
        signals = self.parser.extract_signals("feat!: new payload format")
        breaking = _by_kind(signals, SignalKind.BREAKING_CHANGE)
        assert breaking[0].confidence == 0.9
        assert breaking[0].category_hint == DecisionCategory.API_CHANGE

    def test_reference_signal_has_no_hint(self):
        signals = self.parser.extract_signals("Fix typo", "fixes #3")
        refs = _by_kind(signals, SignalKind.REFERENCE)
        assert refs[0].value == "issue:3"
        assert refs[0].confidence == 0.5
        assert refs[0].category_hint is None

    def test_deprecation(self):
        signals = self.parser.extract_signals("Mark legacy client as deprecated")
        deprecation = _by_kind(signals, SignalKind.DEPRECATION)
        assert deprecation[0].category_hint == DecisionCategory.TECHNOLOGY_REMOVAL

    def test_plain_message_has_no_signals(self):
        assert self.parser.extract_signals("Tweak wording") == []
