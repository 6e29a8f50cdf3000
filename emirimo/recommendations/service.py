"""Recommendation facade used by the API and the CLI.

Responses are plain dicts shaped like the JSON bodies of the
/recommendations/jobs and /jobs/<id>/match endpoints.
"""

from typing import Any, Dict, Optional

from emirimo.logging import get_logger
from emirimo.logging.context import log_context
from emirimo.matching.engine import MatchEngine
from emirimo.matching.ranker import RecommendationRanker

from .exceptions import JobNotFoundError, NotASeekerError

logger = get_logger(__name__, component="recommendations")


class RecommendationService:
    """Read-only recommendation queries for seekers and employers."""

    def __init__(
        self,
        profile_store,
        job_store,
        engine: Optional[MatchEngine] = None,
        ranker: Optional[RecommendationRanker] = None,
        default_limit: int = 10,
    ):
        self.profile_store = profile_store
        self.job_store = job_store
        self.engine = engine or MatchEngine()
        self.ranker = ranker or RecommendationRanker(
            profile_store, job_store, self.engine, default_limit=default_limit
        )
        self.default_limit = default_limit

    def get_job_recommendations(
        self, user_id: str, limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """Ranked jobs for a seeker; an unknown user simply gets none."""
        limit = self.default_limit if limit is None else limit
        recommendations = self.ranker.find_matching_jobs(user_id, limit)
        return {
            "success": True,
            "recommendations": [rec.to_dict() for rec in recommendations],
            "count": len(recommendations),
        }

    def get_job_match(self, user_id: str, job_id: str) -> Dict[str, Any]:
        """Score, reasons and skill split for one seeker/job pair.

        Raises:
            JobNotFoundError: If the job does not exist
            NotASeekerError: If the user is missing or not a seeker
            PersistenceError: If a store fails
        """
        with log_context(seeker_id=user_id, job_id=job_id):
            job = self.job_store.get_by_id(job_id)
            if job is None:
                raise JobNotFoundError(f"Job not found: {job_id}")

            profile = self.profile_store.get_by_id(user_id)
            if profile is None or not profile.is_seeker:
                raise NotASeekerError(f"User is not a job seeker: {user_id}")

            result = self.engine.evaluate(profile, job)

            logger.info(
                f"Match for seeker {user_id} and job {job_id}: {result.score}",
                extra={
                    "event": "recommendations.match",
                    "score": result.score,
                    "match_level": result.match_level,
                },
            )

            return {"success": True, "job_id": job.id, **result.to_dict()}

    def get_top_candidates(self, job_id: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """Ranked seekers for a job (employer view)."""
        limit = self.default_limit if limit is None else limit
        candidates = self.ranker.find_top_candidates(job_id, limit)
        return {
            "success": True,
            "candidates": [candidate.to_dict() for candidate in candidates],
            "count": len(candidates),
        }
