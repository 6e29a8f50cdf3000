"""Match engine combining score, reasons and skill overlap for one pair."""

import logging
from datetime import date
from typing import Callable, Optional

from emirimo.domain.models import JobPosting, SeekerProfile
from emirimo.utils.timestamps import utc_today

from .models import MatchResult
from .reasons import get_match_reasons
from .scoring import score_breakdown
from .skills import skills_overlap

logger = logging.getLogger(__name__)


class MatchEngine:
    """Evaluates a seeker profile against a job posting.

    Responsibilities:
    - Compute the weighted score and its sub-scores
    - Explain the match with ordered reasons
    - Split the job's skills into covered and missing
    """

    def __init__(
        self,
        today_provider: Callable[[], date] = utc_today,
        logger_instance: logging.Logger = None,
    ):
        """Initialize MatchEngine.

        Args:
            today_provider: Callable returning the date current positions run to
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.today_provider = today_provider
        self.logger = logger_instance or logger

    def evaluate(
        self, profile: SeekerProfile, job: JobPosting, today: Optional[date] = None
    ) -> MatchResult:
        """Evaluate a profile against a job.

        Args:
            profile: Seeker profile
            job: Job posting
            today: Override for the reference date

        Returns:
            MatchResult with score, reasons and skill partition
        """
        today = today or self.today_provider()

        # Step 1: Score
        breakdown = score_breakdown(profile, job, today)

        # Step 2: Explain
        reasons = get_match_reasons(profile, job, today)

        # Step 3: Skill partition
        overlap = skills_overlap(profile.skills, job.skills)

        self.logger.debug(
            f"Evaluated seeker {profile.id} against job {job.id}: {breakdown.total}",
            extra={
                "seeker_id": profile.id,
                "job_id": job.id,
                "score": breakdown.total,
                "skills_score": breakdown.skills,
                "education_score": breakdown.education,
                "experience_score": breakdown.experience,
                "preferences_score": breakdown.preferences,
            },
        )

        return MatchResult(
            score=breakdown.total,
            reasons=reasons,
            skills_match=overlap.matched,
            skills_gap=overlap.gap,
            breakdown=breakdown,
        )
