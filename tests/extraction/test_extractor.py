"""Tests for extraction/base.py - the rule-driven commit extractor."""

import pytest

from adr_miner.extraction.base import CommitExtractor, compute_significance, merge_signals
from adr_miner.extraction.models import ArchitecturalSignal, DeltaChange, SignalType
from adr_miner.extraction.rules import LANGUAGE_RULES
from adr_miner.history.message_parser import MessageSignal, SignalKind
from adr_miner.history.models import FileStatus, Language


def extractor_for(language):
    return CommitExtractor(LANGUAGE_RULES[language])


class TestRuleTables:
    """Rule tables compile and cover every supported language."""

    def test_every_language_compiles(self):
        for rules in LANGUAGE_RULES.values():
            assert rules.compiled_rules()
            assert rules.compiled_entry_points()

    def test_only_source_languages_have_tables(self):
        assert all(language.is_source for language in LANGUAGE_RULES)


class TestJavaRepositoryAdded:
    """A commit adding UserRepository.java."""

    def test_data_model_signal_with_added_boost(self, make_commit, make_file):
        commit = make_commit(
            subject="Add user repository",
            files=[
                make_file(
                    "src/main/java/com/acme/UserRepository.java",
                    status=FileStatus.ADDED,
                    additions=20,
                    deletions=0,
                )
            ],
        )
        extraction = extractor_for(Language.JAVA).extract(commit)

        data_model = extraction.signal(SignalType.DATA_MODEL_CHANGE)
        assert data_model is not None
        # 0.6 base + 0.1 for an added file
        assert data_model.confidence == pytest.approx(0.7)
        assert extraction.signal(SignalType.NEW_ABSTRACTION) is None
        assert extraction.primary_language == Language.JAVA

    def test_generic_new_abstraction_needs_keyword(self, make_commit, make_file):
        commit = make_commit(
            files=[make_file("src/main/java/com/acme/PaymentContract.java", status=FileStatus.ADDED)]
        )
        extraction = extractor_for(Language.JAVA).extract(commit)
        abstraction = extraction.signal(SignalType.NEW_ABSTRACTION)
        assert abstraction is not None
        assert abstraction.description == "New abstraction file: src/main/java/com/acme/PaymentContract.java"
        assert abstraction.confidence == pytest.approx(0.8)


class TestNoOwnedFiles:
    """An extractor handed a commit with none of its files."""

    def test_empty_extraction(self, make_commit):
        commit = make_commit(subject="refactor: tidy", files=["src/app.py", "README.md"])
        extraction = extractor_for(Language.JAVA).extract(commit)

        assert extraction.significance == 0.1
        assert extraction.architectural_signals == ()
        assert extraction.functions_changed == ()
        assert extraction.dependency_changes == ()
        assert extraction.patterns_affected == ()
        assert extraction.primary_language == Language.MIXED
        # Message signals are still parsed
        assert extraction.message_signals

    def test_empty_commit(self, make_commit):
        extraction = extractor_for(Language.PYTHON).extract(make_commit(files=[]))
        assert extraction.significance == 0.1


class TestConfidenceAdjustment:
    """Added, large and test-file adjustments."""

    def test_large_change_boost(self, make_commit, make_file):
        commit = make_commit(files=[make_file("app/models.py", additions=60, deletions=5)])
        signal = extractor_for(Language.PYTHON).extract(commit).signal(SignalType.DATA_MODEL_CHANGE)
        # 0.7 base + 0.1 for > 50 lines
        assert signal.confidence == pytest.approx(0.8)

    def test_test_file_penalty(self, make_commit, make_file):
        commit = make_commit(files=[make_file("tests/conftest.py")])
        signal = extractor_for(Language.PYTHON).extract(commit).signal(
            SignalType.TEST_STRATEGY_CHANGE
        )
        assert signal.confidence == pytest.approx(0.4)

    def test_clamped_to_one(self, make_commit, make_file):
        commit = make_commit(
            files=[
                make_file(
                    "src/UserController.java", status=FileStatus.ADDED, additions=200, deletions=0
                )
            ]
        )
        signal = extractor_for(Language.JAVA).extract(commit).signal(SignalType.API_SURFACE_CHANGE)
        assert signal.confidence == 1.0


class TestSignalMerging:
    """Test merge_signals function."""

    def test_same_type_and_description_merge(self):
        signals = [
            ArchitecturalSignal(SignalType.LAYER_CHANGE, "Service layer changed", ("a.py",), 0.5),
            ArchitecturalSignal(SignalType.LAYER_CHANGE, "Service layer changed", ("b.py",), 0.7),
            ArchitecturalSignal(SignalType.LAYER_CHANGE, "Other", ("c.py",), 0.4),
        ]
        merged = merge_signals(signals)
        assert len(merged) == 2
        assert merged[0].files == ("a.py", "b.py")
        assert merged[0].confidence == 0.7

    def test_extract_merges_across_files(self, make_commit):
        commit = make_commit(files=["app/services/billing.py", "app/services/users.py"])
        extraction = extractor_for(Language.PYTHON).extract(commit)
        layer = [s for s in extraction.architectural_signals if s.type == SignalType.LAYER_CHANGE]
        assert len(layer) == 1
        assert set(layer[0].files) == {"app/services/billing.py", "app/services/users.py"}


class TestFunctionDeltas:
    """File-level function deltas and entry points."""

    def test_delta_per_status(self, make_commit, make_file):
        commit = make_commit(
            files=[
                make_file("src/new.ts", status=FileStatus.ADDED),
                make_file("src/gone.ts", status=FileStatus.DELETED),
                make_file("src/big.ts", additions=8, deletions=7),
                make_file("src/small.ts", additions=3, deletions=2),
            ]
        )
        deltas = {d.file: d for d in extractor_for(Language.TYPESCRIPT).extract(commit).functions_changed}

        assert deltas["src/new.ts"].change_type == DeltaChange.ADDED
        assert deltas["src/new.ts"].name == "[new file]"
        assert deltas["src/gone.ts"].change_type == DeltaChange.REMOVED
        assert deltas["src/big.ts"].change_type == DeltaChange.MODIFIED
        assert deltas["src/big.ts"].signature_changed
        assert "src/small.ts" not in deltas

    def test_entry_points(self):
        java = extractor_for(Language.JAVA)
        assert java.is_entry_point("src/main/java/com/acme/ShopApplication.java")
        csharp = extractor_for(Language.CSHARP)
        assert csharp.is_entry_point("Api/Program.cs")
        ts = extractor_for(Language.TYPESCRIPT)
        assert ts.is_entry_point("src/users/users.controller.ts")
        assert not ts.is_entry_point("src/users/users.repo.ts")

    def test_can_handle(self):
        ts = extractor_for(Language.TYPESCRIPT)
        assert ts.can_handle("src/App.TSX")
        assert not ts.can_handle("src/app.js")


class TestSignificance:
    """Test compute_significance function."""

    def test_base_only(self):
        assert compute_significance([], [], [], [], []) == pytest.approx(0.1)

    def test_weighted_sum(self):
        message = [MessageSignal(SignalKind.KEYWORD, "migrate", 0.8)]
        arch = [ArchitecturalSignal(SignalType.LAYER_CHANGE, "x", ("a",), 0.6)]
        score = compute_significance(message, arch, [], [], ["dep"] * 2)
        assert score == pytest.approx(0.1 + 0.24 + 0.18 + 0.10)

    def test_dependency_contribution_capped(self):
        score = compute_significance([], [], [], [], ["dep"] * 10)
        assert score == pytest.approx(0.1 + 0.15)

    def test_capped_at_one(self):
        message = [MessageSignal(SignalKind.BREAKING_CHANGE, "b", 1.0)]
        arch = [ArchitecturalSignal(SignalType.LAYER_CHANGE, "x", ("a",), 1.0)]
        score = compute_significance(message, arch, [], ["p"] * 10, ["d"] * 10)
        assert score == 1.0
