"""Mining pipeline exceptions: history retrieval, extraction, synthesis."""

from typing import Dict, Optional

from .base import AdrMinerError


class MiningPipelineError(AdrMinerError):
    """Base class for errors raised inside the mining pipeline."""

    pass


class HistoryError(MiningPipelineError):
    """Raised when the commit history cannot be retrieved.

    Fatal for a mining run: without commits nothing downstream is possible.
    """

    def __init__(self, repo_path: str, reason: str, stderr: Optional[str] = None):
        details: Dict[str, str] = {"repo": repo_path, "reason": reason}
        if stderr:
            details["stderr"] = stderr
        super().__init__(f"Cannot read git history of {repo_path}", details=details)
        self.repo_path = repo_path
        self.reason = reason
        self.stderr = stderr


class ExtractionError(MiningPipelineError):
    """Raised when a single commit cannot be extracted."""

    def __init__(self, commit_hash: str, reason: str):
        super().__init__(
            f"Failed to extract commit {commit_hash[:7]}",
            details={"commit": commit_hash, "reason": reason},
        )
        self.commit_hash = commit_hash
        self.reason = reason


class SynthesisError(MiningPipelineError):
    """Raised when a decision cannot be synthesized from a cluster."""

    def __init__(self, cluster_id: str, reason: str):
        super().__init__(
            f"Failed to synthesize decision from {cluster_id}",
            details={"cluster": cluster_id, "reason": reason},
        )
        self.cluster_id = cluster_id
        self.reason = reason
