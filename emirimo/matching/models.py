"""Data models for the matching engine.

This module defines the results produced by scoring a seeker against a job
and the ranked recommendation records handed to API and notification layers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from emirimo.domain.models import JobPosting, SeekerProfile

from .scoring import ScoreBreakdown

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60
FAIR_THRESHOLD = 40


def match_level(score: int) -> str:
    """Bucket a score: excellent >= 80, good >= 60, fair >= 40, poor below."""
    if score >= EXCELLENT_THRESHOLD:
        return "excellent"
    if score >= GOOD_THRESHOLD:
        return "good"
    if score >= FAIR_THRESHOLD:
        return "fair"
    return "poor"


@dataclass
class MatchResult:
    """Result of evaluating a seeker profile against one job posting.

    Attributes:
        score: Integer match score in [0, 100]
        reasons: Ordered human-readable explanations
        skills_match: Job skills the seeker covers (job order)
        skills_gap: Job skills the seeker lacks (job order)
        breakdown: The four sub-scores behind the total
    """

    score: int
    reasons: List[str] = field(default_factory=list)
    skills_match: List[str] = field(default_factory=list)
    skills_gap: List[str] = field(default_factory=list)
    breakdown: ScoreBreakdown = None

    @property
    def match_level(self) -> str:
        return match_level(self.score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "reasons": list(self.reasons),
            "match_level": self.match_level,
            "skills_match": list(self.skills_match),
            "skills_gap": list(self.skills_gap),
        }


@dataclass
class JobRecommendation:
    """A job ranked for a seeker."""

    job: JobPosting
    score: int
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job": self.job.model_dump(mode="json"),
            "score": self.score,
            "reasons": list(self.reasons),
        }


@dataclass
class CandidateRecommendation:
    """A seeker ranked for a job (the employer-facing view)."""

    seeker: SeekerProfile
    score: int
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seeker": {
                "id": self.seeker.id,
                "name": self.seeker.name,
                "email": self.seeker.email,
                "skills": list(self.seeker.skills),
            },
            "score": self.score,
            "reasons": list(self.reasons),
        }
