"""Job matching: scoring, explanations and ranking.

This module provides:
- calculate_match_score / score_breakdown: weighted 0-100 score for a profile/job pair
- get_match_reasons: ordered human-readable reasons
- skills_overlap: fuzzy split of a job's skills into covered and missing
- MatchEngine: combines the above into a MatchResult
- RecommendationRanker: ranks jobs for seekers and seekers for jobs
- Payload helpers for notification templates
"""

from .engine import MatchEngine
from .models import CandidateRecommendation, JobRecommendation, MatchResult, match_level
from .ranker import RecommendationRanker
from .reasons import get_match_reasons
from .scoring import ScoreBreakdown, calculate_match_score, score_breakdown
from .skills import SkillsOverlap, skill_matches, skills_overlap
from .utils import build_digest_payload, build_recommendation_payload

__all__ = [
    "MatchEngine",
    "MatchResult",
    "JobRecommendation",
    "CandidateRecommendation",
    "match_level",
    "RecommendationRanker",
    "get_match_reasons",
    "ScoreBreakdown",
    "calculate_match_score",
    "score_breakdown",
    "SkillsOverlap",
    "skill_matches",
    "skills_overlap",
    "build_recommendation_payload",
    "build_digest_payload",
]
