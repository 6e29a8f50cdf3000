"""Human-readable explanations of why a job suits a seeker."""

from datetime import date
from typing import List, Optional

from emirimo.domain.models import JobPosting, SeekerProfile
from emirimo.utils.timestamps import utc_today

from .scoring import experience_tier_matches, location_matches, total_experience_years
from .skills import skills_overlap

EXPERIENCE_REASONS = {
    "entry": "Perfect for entry-level position",
    "mid": "Matches mid-level experience requirements",
    "senior": "Meets senior-level experience requirements",
}
EDUCATION_REASON = "Has relevant educational background"
LOCATION_REASON = "Matches preferred work location"


def _has_relevant_education(profile: SeekerProfile) -> bool:
    for entry in profile.education:
        field_of_study = (entry.field_of_study or "").lower()
        degree = (entry.degree or "").lower()
        if "computer" in field_of_study or "technology" in field_of_study or "bachelor" in degree:
            return True
    return False


def get_match_reasons(
    profile: SeekerProfile, job: JobPosting, today: Optional[date] = None
) -> List[str]:
    """List the reasons a job fits a seeker, in a fixed order.

    Order is skills, experience, education, location; categories with
    nothing to say are left out. Experience is judged on total years even
    when the seeker has no work history (0 years fits an entry-level job).

    Args:
        profile: Seeker profile
        job: Job posting
        today: End date for current positions (defaults to today's UTC date)

    Returns:
        List of reason strings (possibly empty)
    """
    reasons: List[str] = []

    matched = skills_overlap(profile.skills, job.skills).matched
    if matched:
        reasons.append(f"Matches {len(matched)} required skills: {', '.join(matched)}")

    years = total_experience_years(profile.work_experience, today or utc_today())
    if experience_tier_matches(job.experience_level, years):
        reasons.append(EXPERIENCE_REASONS[job.experience_level])

    if _has_relevant_education(profile):
        reasons.append(EDUCATION_REASON)

    work_locations = profile.job_preferences.work_locations
    if work_locations and location_matches(work_locations, job.location):
        reasons.append(LOCATION_REASON)

    return reasons
