"""Tests for mining/miner.py - the end-to-end pipeline with a fake history."""

import threading

import pytest

from adr_miner.config import MiningConfig
from adr_miner.exceptions import HistoryError
from adr_miner.extraction.models import DeltaChange, PatternDelta
from adr_miner.extraction.patterns import NullPatternStore
from adr_miner.history.message_parser import CommitParser
from adr_miner.history.models import HistoryWalk
from adr_miner.mining.miner import NO_COMMITS_WARNING, DecisionMiner
from adr_miner.mining.models import MiningErrorType
from adr_miner.synthesis.synthesizer import DecisionSynthesizer


class FakeHistory:
    """History provider returning a fixed commit list."""

    def __init__(self, commits=(), has_more=False, error=None):
        self.commits = sorted(commits, key=lambda c: c.date, reverse=True)
        self.has_more = has_more
        self.error = error
        self.calls = []

    def walk(self, root_dir, since=None, until=None, max_commits=None, include_merges=False, exclude_paths=()):
        self.calls.append({"root_dir": root_dir, "max_commits": max_commits, "since": since})
        if self.error is not None:
            raise self.error
        dates = [c.date for c in self.commits]
        return HistoryWalk(
            commits=list(self.commits),
            date_range=(min(dates), max(dates)) if dates else None,
            total_commits=len(self.commits),
            has_more=self.has_more,
        )


class ExplodingParser(CommitParser):
    """Parser that fails on any message mentioning "boom"."""

    def extract_signals(self, subject, body=""):
        if "boom" in subject:
            raise RuntimeError("parser exploded")
        return super().extract_signals(subject, body)


class FixedPatternStore:
    def changes_for(self, commit, files):
        return [
            PatternDelta(
                pattern_id="repository",
                pattern_name="Repository",
                category="structural",
                change_type=DeltaChange.ADDED,
                files_affected=tuple(files[:1]),
            )
        ]


def model_commits(make_commit, count=3, start=0, path="app/models.py"):
    return [
        make_commit(subject=f"Rework user model part {i}", files=[path], days=start + i)
        for i in range(count)
    ]


class TestEmptyAndFatal:
    def test_no_commits(self):
        result = DecisionMiner(history=FakeHistory()).mine("/repo")
        assert result.decisions == []
        assert result.errors == []
        assert result.warnings == [NO_COMMITS_WARNING]
        assert result.summary.total_decisions == 0
        assert result.summary.by_status["draft"] == 0
        assert not result.failed

    def test_history_failure_is_only_error(self):
        history = FakeHistory(error=HistoryError("/repo", "not a git repository"))
        result = DecisionMiner(history=history).mine("/repo")

        assert result.failed
        assert len(result.errors) == 1
        assert result.errors[0].type == MiningErrorType.GIT_ERROR
        assert "not a git repository" in result.errors[0].message
        assert result.decisions == []

    def test_max_commits_zero_means_unlimited(self, make_commit):
        history = FakeHistory(model_commits(make_commit))
        DecisionMiner(MiningConfig(max_commits=0), history=history).mine("/repo")
        assert history.calls[0]["max_commits"] is None


class TestPipeline:
    """Full runs over synthetic commits."""

    def test_cluster_becomes_decision(self, make_commit):
        commits = model_commits(make_commit) + [
            make_commit(subject="Tweak readme", files=["README.md"], days=40)
        ]
        config = MiningConfig(min_confidence=0.2, workers=1)

        result = DecisionMiner(config, history=FakeHistory(commits)).mine("/repo")

        assert result.errors == []
        assert len(result.decisions) == 1
        decision = result.decisions[0]
        assert decision.cluster.size == 3
        assert decision.confidence_score >= 0.2
        assert result.summary.total_commits_analyzed == 4
        assert result.summary.total_decisions == 1
        assert result.summary.avg_cluster_size == 3.0

    def test_decisions_meet_min_confidence(self, make_commit):
        commits = model_commits(make_commit) + model_commits(make_commit, start=30, path="src/api.ts")
        for threshold in (0.2, 0.4, 0.6):
            config = MiningConfig(min_confidence=threshold, workers=1)
            result = DecisionMiner(config, history=FakeHistory(commits)).mine("/repo")
            assert all(d.confidence_score >= threshold for d in result.decisions)
            assert result.summary.significant_commits <= result.summary.total_commits_analyzed

    def test_runs_are_deterministic(self, make_commit):
        commits = model_commits(make_commit) + model_commits(make_commit, start=30, path="src/api.ts")
        config = MiningConfig(min_confidence=0.2, workers=1)

        first = DecisionMiner(config, history=FakeHistory(commits)).mine("/repo")
        second = DecisionMiner(config, history=FakeHistory(commits)).mine("/repo")

        assert [d.id for d in first.decisions] == [d.id for d in second.decisions]
        assert [d.confidence_score for d in first.decisions] == [
            d.confidence_score for d in second.decisions
        ]

    def test_parallel_matches_sequential(self, make_commit):
        commits = []
        for block in range(4):
            commits += model_commits(make_commit, start=block * 30, path=f"app/mod{block}/models.py")

        sequential = DecisionMiner(
            MiningConfig(min_confidence=0.2, workers=1), history=FakeHistory(commits)
        ).mine("/repo")
        parallel = DecisionMiner(
            MiningConfig(min_confidence=0.2, workers=4), history=FakeHistory(commits)
        ).mine("/repo")

        assert len(sequential.decisions) == 4
        assert [d.id for d in parallel.decisions] == [d.id for d in sequential.decisions]

    def test_truncated_history_warns(self, make_commit):
        history = FakeHistory(model_commits(make_commit), has_more=True)
        result = DecisionMiner(MiningConfig(max_commits=3), history=history).mine("/repo")
        assert any("truncated at 3 commits" in w for w in result.warnings)


class TestRecoverableErrors:
    def test_extraction_error_skips_commit(self, make_commit):
        commits = model_commits(make_commit)
        bad = make_commit(subject="boom", files=["app/models.py"], days=1.5)
        config = MiningConfig(min_confidence=0.2, workers=1)

        result = DecisionMiner(
            config, history=FakeHistory(commits + [bad]), parser=ExplodingParser()
        ).mine("/repo")

        assert not result.failed
        assert [e.type for e in result.errors] == [MiningErrorType.EXTRACTION_ERROR]
        assert result.errors[0].commit_hash == bad.hash
        assert "parser exploded" in result.errors[0].message
        assert len(result.decisions) == 1
        assert bad.hash not in result.decisions[0].cluster.commit_hashes

    def test_synthesis_error_skips_cluster(self, make_commit, monkeypatch):
        def explode(self, cluster, extractions):
            raise ValueError("no luck")

        monkeypatch.setattr(DecisionSynthesizer, "synthesize", explode)
        config = MiningConfig(min_confidence=0.2, workers=1)

        result = DecisionMiner(config, history=FakeHistory(model_commits(make_commit))).mine("/repo")

        assert result.decisions == []
        assert [e.type for e in result.errors] == [MiningErrorType.SYNTHESIS_ERROR]
        assert result.errors[0].cluster_id.startswith("cluster-")
        assert not result.failed


class TestCancellation:
    def test_preset_cancel_returns_partial_result(self, make_commit):
        cancel = threading.Event()
        cancel.set()

        result = DecisionMiner(
            MiningConfig(min_confidence=0.2), history=FakeHistory(model_commits(make_commit))
        ).mine("/repo", cancel_event=cancel)

        assert result.decisions == []
        assert result.errors == []
        assert len(result.warnings) == 1
        assert "cancelled after history walk" in result.warnings[0]
        assert result.summary.total_commits_analyzed == 3


class TestPatternStore:
    def test_disabled_by_default(self):
        miner = DecisionMiner(pattern_store=FixedPatternStore())
        assert isinstance(miner.pattern_store, NullPatternStore)

    @pytest.mark.parametrize("enabled", [True, False])
    def test_pattern_deltas_reach_decisions(self, make_commit, enabled):
        config = MiningConfig(min_confidence=0.2, workers=1, use_pattern_data=enabled)
        result = DecisionMiner(
            config,
            history=FakeHistory(model_commits(make_commit)),
            pattern_store=FixedPatternStore(),
        ).mine("/repo")

        patterns = [p.pattern_id for p in result.decisions[0].patterns_changed]
        assert patterns == (["repository"] if enabled else [])
