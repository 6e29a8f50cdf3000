"""Recommendation ranking for seekers (jobs) and employers (candidates).

The ranker resolves records through injected stores, scores each pair with
the MatchEngine, drops zero scores, sorts by score descending (stable, so
equal scores keep store order) and truncates to the requested limit.
"""

from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from emirimo.domain.models import JobPosting, SeekerProfile
from emirimo.logging import get_logger
from emirimo.logging.context import log_context
from emirimo.persistence.exceptions import PersistenceError

from .engine import MatchEngine
from .models import CandidateRecommendation, JobRecommendation, MatchResult

logger = get_logger(__name__, component="ranker")

DEFAULT_LIMIT = 10

T = TypeVar("T")


class ProfileStore(Protocol):
    def get_by_id(self, user_id: str) -> Optional[SeekerProfile]: ...

    def list_active_seekers(self) -> List[SeekerProfile]: ...


class JobStore(Protocol):
    def get_by_id(self, job_id: str) -> Optional[JobPosting]: ...

    def list_active(self) -> List[JobPosting]: ...


class RecommendationRanker:
    """Ranks jobs for a seeker and seekers for a job.

    find_* entry points are advisory: a missing record or a store failure
    yields an empty list (logged). rank_* work on records already in hand
    and let store-independent errors propagate, except per-item scoring
    failures which are logged and skipped.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        job_store: JobStore,
        engine: Optional[MatchEngine] = None,
        default_limit: int = DEFAULT_LIMIT,
        max_workers: int = 1,
    ):
        """Initialize RecommendationRanker.

        Args:
            profile_store: Source of seeker profiles
            job_store: Source of job postings
            engine: MatchEngine used for scoring (a default one if omitted)
            default_limit: Limit applied when callers pass None
            max_workers: Thread pool size for scoring (1 scores inline)
        """
        self.profile_store = profile_store
        self.job_store = job_store
        self.engine = engine or MatchEngine()
        self.default_limit = default_limit
        self.max_workers = max_workers

    def find_matching_jobs(
        self, seeker_id: str, limit: Optional[int] = DEFAULT_LIMIT
    ) -> List[JobRecommendation]:
        """Top active jobs for a seeker.

        Args:
            seeker_id: User id of the seeker
            limit: Maximum results (None uses the configured default)

        Returns:
            Ranked recommendations; empty if the user is missing, not a
            seeker, or the stores fail
        """
        with log_context(seeker_id=seeker_id):
            try:
                profile = self.profile_store.get_by_id(seeker_id)
                if profile is None or not profile.is_seeker:
                    logger.info(
                        "No recommendations: seeker not found",
                        extra={
                            "event": "ranker.seeker.not_found",
                            "found": profile is not None,
                        },
                    )
                    return []

                jobs = self.job_store.list_active()
                return self.rank_jobs(profile, jobs, limit)

            except PersistenceError as e:
                logger.error(
                    f"Store failure while ranking jobs: {e}",
                    exc_info=True,
                    extra={"event": "ranker.store.failed", "error_type": type(e).__name__},
                )
                return []

    def rank_jobs(
        self,
        profile: SeekerProfile,
        jobs: Sequence[JobPosting],
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> List[JobRecommendation]:
        """Score and rank the given jobs for a profile."""
        scored = self._score_all(jobs, lambda job: self.engine.evaluate(profile, job), "job")
        ranked = self._rank(scored, limit)

        logger.info(
            f"Ranked {len(jobs)} jobs for seeker {profile.id}",
            extra={
                "event": "ranker.completed",
                "target": "jobs",
                "evaluated": len(jobs),
                "returned": len(ranked),
            },
        )

        return [
            JobRecommendation(job=job, score=result.score, reasons=result.reasons)
            for job, result in ranked
        ]

    def find_top_candidates(
        self, job_id: str, limit: Optional[int] = DEFAULT_LIMIT
    ) -> List[CandidateRecommendation]:
        """Top active seekers for a job; empty if the job is missing or inactive."""
        with log_context(job_id=job_id):
            try:
                job = self.job_store.get_by_id(job_id)
                if job is None or not job.is_active:
                    logger.info(
                        "No candidates: job not found or inactive",
                        extra={"event": "ranker.job.not_found", "found": job is not None},
                    )
                    return []

                seekers = self.profile_store.list_active_seekers()
                return self.rank_candidates(job, seekers, limit)

            except PersistenceError as e:
                logger.error(
                    f"Store failure while ranking candidates: {e}",
                    exc_info=True,
                    extra={"event": "ranker.store.failed", "error_type": type(e).__name__},
                )
                return []

    def rank_candidates(
        self,
        job: JobPosting,
        seekers: Sequence[SeekerProfile],
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> List[CandidateRecommendation]:
        """Score and rank the given seekers for a job."""
        scored = self._score_all(seekers, lambda seeker: self.engine.evaluate(seeker, job), "seeker")
        ranked = self._rank(scored, limit)

        logger.info(
            f"Ranked {len(seekers)} candidates for job {job.id}",
            extra={
                "event": "ranker.completed",
                "target": "candidates",
                "evaluated": len(seekers),
                "returned": len(ranked),
            },
        )

        return [
            CandidateRecommendation(seeker=seeker, score=result.score, reasons=result.reasons)
            for seeker, result in ranked
        ]

    def _score_all(
        self, items: Sequence[T], evaluate: Callable[[T], MatchResult], kind: str
    ) -> List[Tuple[T, MatchResult]]:
        """Evaluate every item, keeping input order and skipping failures."""

        def safe_evaluate(item: T) -> Optional[MatchResult]:
            try:
                return evaluate(item)
            except Exception as e:
                logger.warning(
                    f"Skipping {kind} {getattr(item, 'id', '?')}: scoring failed: {e}",
                    exc_info=True,
                    extra={
                        "event": "ranker.item.failed",
                        "item_type": kind,
                        "item_id": getattr(item, "id", None),
                        "error_type": type(e).__name__,
                    },
                )
                return None

        if self.max_workers > 1 and len(items) > 1:
            # Each task runs in a copy of the caller's context so log fields carry over
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(copy_context().run, safe_evaluate, item) for item in items
                ]
                results = [future.result() for future in futures]
        else:
            results = [safe_evaluate(item) for item in items]

        return [(item, result) for item, result in zip(items, results) if result is not None]

    def _rank(
        self, scored: List[Tuple[T, MatchResult]], limit: Optional[int]
    ) -> List[Tuple[T, MatchResult]]:
        if limit is None:
            limit = self.default_limit
        if limit <= 0:
            return []

        positive = [pair for pair in scored if pair[1].score > 0]
        # sorted() is stable: equal scores keep input order
        positive = sorted(positive, key=lambda pair: pair[1].score, reverse=True)
        return positive[:limit]
