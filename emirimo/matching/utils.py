"""Helpers that turn match results into payloads for notifications.

The payload dicts are what the email templates and the real-time notifier
receive; they hold only JSON-safe values.
"""

from typing import Dict, List

from emirimo.domain.models import JobPosting, SeekerProfile

from .models import JobRecommendation, MatchResult, match_level


def build_job_summary(job: JobPosting) -> Dict:
    """Flatten a posting into the fields templates show."""
    return {
        "id": job.id,
        "title": job.title,
        "employer_name": job.employer_name or "an employer",
        "location": job.location or "Remote",
        "type": job.type,
        "experience_level": job.experience_level,
        "skills": list(job.skills),
        "posted_at": job.posted_at.isoformat() if job.posted_at else None,
    }


def build_user_summary(profile: SeekerProfile) -> Dict:
    return {
        "id": profile.id,
        "name": profile.name or "there",
        "email": profile.email,
    }


def build_recommendation_payload(
    profile: SeekerProfile, job: JobPosting, match_result: MatchResult
) -> Dict:
    """Build the payload for a single job recommendation email.

    Args:
        profile: Recipient seeker
        job: Recommended job
        match_result: Result of evaluating profile against job

    Returns:
        Dict with keys:
        - user: id, name and email of the recipient
        - job: flattened posting fields
        - score: integer match score
        - match_level: excellent / good / fair / poor
        - reasons: ordered match reasons
        - skills_match: job skills the seeker has
        - skills_gap: job skills the seeker lacks
    """
    return {
        "user": build_user_summary(profile),
        "job": build_job_summary(job),
        "score": match_result.score,
        "match_level": match_result.match_level,
        "reasons": list(match_result.reasons),
        "skills_match": list(match_result.skills_match),
        "skills_gap": list(match_result.skills_gap),
    }


def build_digest_payload(
    profile: SeekerProfile, recommendations: List[JobRecommendation]
) -> Dict:
    """Build the payload for digest and reminder emails (several jobs at once)."""
    return {
        "user": build_user_summary(profile),
        "recommendations": [
            {
                "job": build_job_summary(rec.job),
                "score": rec.score,
                "match_level": match_level(rec.score),
                "reasons": list(rec.reasons),
            }
            for rec in recommendations
        ],
        "count": len(recommendations),
    }
