"""Tests for serializers.py - JSON-ready conversion of results and decisions."""

import json
from datetime import datetime, timezone
from pathlib import Path

from adr_miner.clustering.clusterer import build_cluster
from adr_miner.history.dependencies import DependencyChangeType, DependencyDelta
from adr_miner.mining.models import MiningError, MiningErrorType, MiningResult
from adr_miner.mining.summary import build_summary
from adr_miner.serializers import decision_to_dict, result_to_dict, to_jsonable
from adr_miner.synthesis.synthesizer import DecisionSynthesizer


class TestToJsonable:
    def test_scalars_and_containers(self):
        when = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        data = to_jsonable(
            {
                "when": when,
                "kind": MiningErrorType.GIT_ERROR,
                "ids": frozenset({"b", "a"}),
                "path": Path("docs/adr"),
                "pair": (1, 2.5),
                "none": None,
            }
        )
        assert data == {
            "when": "2024-03-01T12:00:00+00:00",
            "kind": "git-error",
            "ids": ["a", "b"],
            "path": "docs/adr",
            "pair": [1, 2.5],
            "none": None,
        }

    def test_dataclass(self):
        error = MiningError(MiningErrorType.EXTRACTION_ERROR, "bad", commit_hash="abc")
        assert to_jsonable(error) == {
            "type": "extraction-error",
            "message": "bad",
            "commit_hash": "abc",
            "cluster_id": None,
            "stack": None,
        }


class TestDecisionToDict:
    def test_derived_fields(self, make_commit, make_extraction):
        dep = DependencyDelta("redis", DependencyChangeType.ADDED, "package.json", version_after="^4.0.0")
        members = [
            make_extraction(make_commit(files=["package.json"], days=i), dependencies=[dep])
            for i in range(2)
        ]
        decision = DecisionSynthesizer(min_confidence=0.0).synthesize(build_cluster(members), members)

        data = decision_to_dict(decision)

        assert data["id"] == decision.id
        assert data["status"] == "draft"
        assert data["category"] == "technology-adoption"
        assert data["date_range"] == {
            "start": "2024-03-01T12:00:00+00:00",
            "end": "2024-03-02T12:00:00+00:00",
        }
        assert data["duration"] == "1 day"
        assert data["dependencies_changed"][0]["name"] == "redis"
        assert data["dependencies_changed"][0]["change_type"] == "added"
        assert data["cluster"]["date_range"] == data["date_range"]
        assert data["cluster"]["commits"][0]["hash"] == members[0].commit.hash
        json.dumps(data)


class TestResultToDict:
    def test_shape(self, make_commit, make_extraction):
        rejected = build_cluster([make_extraction(make_commit(files=["a.py"]))])
        result = MiningResult(
            summary=build_summary([], 1, 0, None, 0.01),
            rejected_clusters=[rejected],
            warnings=["careful"],
        )

        data = result_to_dict(result)

        assert set(data) == {"decisions", "summary", "rejected_clusters", "errors", "warnings"}
        assert data["rejected_clusters"] == [
            {"id": rejected.id, "commits": [rejected.commits[0].hash]}
        ]
        assert data["summary"]["date_range"] is None
        assert data["summary"]["top_dependencies"] == []
        assert data["warnings"] == ["careful"]
        json.dumps(data)
