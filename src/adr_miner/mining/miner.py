"""End-to-end decision mining pipeline.

    walk history -> extract -> filter significant -> cluster -> synthesize -> summarize

Extraction and synthesis fan out over a thread pool; clustering is a single
sequential pass. Recoverable failures are collected as MiningError records
and never raised from ``mine()``.
"""

import threading
import time
import traceback
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import partial
from typing import Callable, Optional, Protocol, Sequence, TypeVar

from ..clustering.clusterer import CommitClusterer
from ..clustering.models import CommitCluster
from ..config import MiningConfig
from ..exceptions import ExtractionError, SynthesisError
from ..extraction.models import CommitExtraction
from ..extraction.patterns import NullPatternStore, PatternStore
from ..extraction.registry import ExtractorRegistry
from ..history.dependencies import DependencyDiffAnalyzer
from ..history.git_walker import GitWalker
from ..history.message_parser import CommitParser
from ..history.models import Commit, HistoryWalk
from ..logging_config import get_logger, log_phase
from ..synthesis.models import Decision
from ..synthesis.synthesizer import DecisionSynthesizer
from .models import MiningError, MiningErrorType, MiningResult
from .summary import build_summary, empty_summary

logger = get_logger(__name__)

NO_COMMITS_WARNING = "No commits found in the specified range"

# Below this many items the pool overhead is not worth it
_PARALLEL_THRESHOLD = 10

T = TypeVar("T")
R = TypeVar("R")


class HistoryProvider(Protocol):
    def walk(
        self,
        root_dir: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        max_commits: Optional[int] = None,
        include_merges: bool = False,
        exclude_paths: Sequence[str] = (),
    ) -> HistoryWalk: ...


def _error_order(error: MiningError) -> tuple[int, str]:
    # Workers finish in any order; report errors deterministically
    return (list(MiningErrorType).index(error.type), error.commit_hash or error.cluster_id or "")


class _Cancelled(Exception):
    """Internal signal: the caller asked the run to stop between phases."""


class DecisionMiner:
    """Mine architectural decisions from a repository's history.

    Collaborators default to the git walker, the commit message parser, a
    manifest-diffing dependency analyzer and an empty pattern store.

    Example:
        >>> miner = DecisionMiner(MiningConfig(min_confidence=0.6))
        >>> result = miner.mine(".")
        >>> for decision in result.decisions:
        ...     print(decision.id, decision.title)
    """

    def __init__(
        self,
        config: Optional[MiningConfig] = None,
        history: Optional[HistoryProvider] = None,
        parser: Optional[CommitParser] = None,
        dependency_analyzer: Optional[DependencyDiffAnalyzer] = None,
        pattern_store: Optional[PatternStore] = None,
    ):
        self.config = config or MiningConfig()
        self.history = history or GitWalker(timeout_seconds=self.config.git_timeout_seconds)
        self.parser = parser or CommitParser()
        self.dependency_analyzer = dependency_analyzer
        if pattern_store is not None and self.config.use_pattern_data:
            self.pattern_store: PatternStore = pattern_store
        else:
            self.pattern_store = NullPatternStore()

    def mine(
        self,
        root_dir: str = ".",
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> MiningResult:
        """Run the full pipeline over ``root_dir``.

        Args:
            root_dir: Repository root
            since: Only commits after this time
            until: Only commits before this time
            cancel_event: When set, the run stops at the next phase boundary
                and returns what it has with a warning

        Returns:
            MiningResult; fatal history failures yield a result whose only
            content is a git-error
        """
        started = time.perf_counter()
        errors: list[MiningError] = []
        errors_lock = threading.Lock()
        warnings: list[str] = []

        def record(error: MiningError) -> None:
            with errors_lock:
                errors.append(error)

        logger.info("Walking git history of %s", root_dir)
        try:
            with log_phase(logger, "history"):
                walk = self.history.walk(
                    root_dir,
                    since=since,
                    until=until,
                    max_commits=self.config.max_commits or None,
                    include_merges=self.config.include_merge_commits,
                    exclude_paths=self.config.exclude_paths,
                )
        except Exception as e:
            logger.error("Failed to walk git history: %s", e)
            return MiningResult(
                summary=empty_summary(),
                errors=[
                    MiningError(
                        type=MiningErrorType.GIT_ERROR,
                        message=f"Failed to walk git history: {e}",
                        stack=traceback.format_exc(),
                    )
                ],
            )

        if not walk.commits:
            logger.warning(NO_COMMITS_WARNING)
            return MiningResult(summary=empty_summary(), warnings=[NO_COMMITS_WARNING])

        logger.info("Found %d commits", len(walk.commits))
        if walk.has_more:
            warnings.append(
                f"History truncated at {self.config.max_commits} commits; "
                "raise max_commits to mine further back"
            )

        extractions: list[CommitExtraction] = []
        significant: list[CommitExtraction] = []
        clusters: list[CommitCluster] = []
        rejected: list[CommitCluster] = []
        decisions: list[Decision] = []

        try:
            self._check_cancel(cancel_event, "history walk")

            with log_phase(logger, "extraction"):
                registry = self._build_registry(root_dir)
                extractions = self._fan_out(
                    walk.commits,
                    partial(self._extract_one, registry),
                    lambda commit, e: record(self._extraction_error(commit, e)),
                )
            self._check_cancel(cancel_event, "extraction")

            significant = [e for e in extractions if e.significance >= self.config.min_confidence]
            logger.info("%d of %d commits are significant", len(significant), len(extractions))

            with log_phase(logger, "clustering"):
                clustering = CommitClusterer(
                    self.config.thresholds, self.config.min_cluster_size
                ).cluster(significant)
            clusters, rejected = clustering.clusters, clustering.rejected
            logger.info("%d clusters formed, %d rejected", len(clusters), len(rejected))
            self._check_cancel(cancel_event, "clustering")

            with log_phase(logger, "synthesis"):
                synthesizer = DecisionSynthesizer(
                    self.config.min_confidence, self.config.thresholds
                )
                synthesized = self._fan_out(
                    clusters,
                    lambda cluster: self._synthesize_one(synthesizer, cluster, significant),
                    lambda cluster, e: record(self._synthesis_error(cluster, e)),
                )
            decisions = [d for d in synthesized if d is not None]
            logger.info("%d decisions synthesized", len(decisions))
        except _Cancelled as e:
            warnings.append(str(e))
            logger.warning("%s", e)

        summary = build_summary(
            decisions,
            total_commits=len(walk.commits),
            significant_commits=len(significant),
            date_range=walk.date_range,
            duration_seconds=time.perf_counter() - started,
        )
        return MiningResult(
            decisions=decisions,
            summary=summary,
            rejected_clusters=rejected,
            errors=sorted(errors, key=_error_order),
            warnings=warnings,
        )

    def _build_registry(self, root_dir: str) -> ExtractorRegistry:
        analyzer = self.dependency_analyzer
        if analyzer is None:
            file_at = getattr(self.history, "file_at", None)
            if self.config.analyze_manifests and file_at is not None:
                analyzer = DependencyDiffAnalyzer(content_provider=partial(file_at, root_dir))
            else:
                analyzer = DependencyDiffAnalyzer()
        return ExtractorRegistry(
            parser=self.parser,
            dependency_analyzer=analyzer,
            pattern_store=self.pattern_store,
            thresholds=self.config.thresholds,
        )

    @staticmethod
    def _extract_one(registry: ExtractorRegistry, commit: Commit) -> CommitExtraction:
        try:
            return registry.extract(commit)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(commit.hash, str(e)) from e

    @staticmethod
    def _synthesize_one(
        synthesizer: DecisionSynthesizer,
        cluster: CommitCluster,
        extractions: Sequence[CommitExtraction],
    ) -> Optional[Decision]:
        try:
            return synthesizer.synthesize(cluster, extractions)
        except SynthesisError:
            raise
        except Exception as e:
            raise SynthesisError(cluster.id, str(e)) from e

    def _fan_out(
        self,
        items: Sequence[T],
        work: Callable[[T], R],
        on_error: Callable[[T, Exception], None],
    ) -> list[R]:
        """Apply ``work`` to every item, keeping input order in the output.

        Failed items are reported through ``on_error`` (from the worker thread)
        and left out.
        """

        def run(item: T) -> Optional[tuple[R]]:
            try:
                return (work(item),)
            except Exception as e:
                on_error(item, e)
                return None

        if self.config.worker_count <= 1 or len(items) < _PARALLEL_THRESHOLD:
            results = [run(item) for item in items]
        else:
            with ThreadPoolExecutor(max_workers=self.config.worker_count) as executor:
                results = list(executor.map(run, items))

        return [r[0] for r in results if r is not None]

    @staticmethod
    def _check_cancel(cancel_event: Optional[threading.Event], phase: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise _Cancelled(f"Mining cancelled after {phase}; returning partial results")

    @staticmethod
    def _extraction_error(commit: Commit, error: Exception) -> MiningError:
        logger.warning("Failed to extract commit %s: %s", commit.short_hash, error)
        return MiningError(
            type=MiningErrorType.EXTRACTION_ERROR,
            message=f"Failed to extract commit {commit.short_hash}: {error}",
            commit_hash=commit.hash,
            stack="".join(traceback.format_exception(error)),
        )

    @staticmethod
    def _synthesis_error(cluster: CommitCluster, error: Exception) -> MiningError:
        logger.warning("Failed to synthesize decision from %s: %s", cluster.id, error)
        return MiningError(
            type=MiningErrorType.SYNTHESIS_ERROR,
            message=f"Failed to synthesize decision from cluster: {error}",
            cluster_id=cluster.id,
            stack="".join(traceback.format_exception(error)),
        )
