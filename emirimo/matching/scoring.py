"""Weighted match score between a seeker profile and a job posting.

The total score blends four sub-scores, each on a 0-100 scale:

    skills * 0.40 + education * 0.20 + experience * 0.25 + preferences * 0.15

The weighted sum is rounded half-up to an integer and capped at 100. All
functions here are pure; "today" is passed in so results are reproducible.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from emirimo.domain.models import (
    EducationEntry,
    JobPosting,
    JobPreferences,
    SeekerProfile,
    WorkExperience,
)
from emirimo.utils.timestamps import utc_today

from .skills import skills_overlap

SKILLS_WEIGHT = 0.40
EDUCATION_WEIGHT = 0.20
EXPERIENCE_WEIGHT = 0.25
PREFERENCES_WEIGHT = 0.15

NO_JOB_SKILLS_SCORE = 50
NO_EDUCATION_SCORE = 30
RELEVANT_EDUCATION_SCORE = 80
OTHER_EDUCATION_SCORE = 40
NO_EXPERIENCE_SCORE = 20
PREFERENCES_BASE_SCORE = 50

RELEVANT_EDUCATION_KEYWORDS = ("computer", "technology", "business", "engineering")
ADVANCED_DEGREE_KEYWORDS = ("bachelor", "master")

DAYS_PER_YEAR = 365

# Remote preference -> job types it accepts. "flexible" accepts anything.
REMOTE_COMPATIBILITY = {
    "remote": {"remote"},
    "onsite": {"onsite"},
    "hybrid": {"hybrid", "remote"},
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """The four sub-scores and the final rounded total."""

    skills: float
    education: float
    experience: float
    preferences: float
    total: int

    def to_dict(self) -> dict:
        return {
            "skills": self.skills,
            "education": self.education,
            "experience": self.experience,
            "preferences": self.preferences,
            "total": self.total,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (38.5 -> 39).

    Float noise from the weighted sum (e.g. 38.49999999) is trimmed to six
    decimal places before rounding.
    """
    trimmed = Decimal(repr(round(value, 6)))
    return int(trimmed.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def skills_score(profile_skills: Iterable[str], job_skills: Iterable[str]) -> float:
    """Percentage of the job's skills covered by the seeker (50 if the job lists none)."""
    job_skills = list(job_skills)
    if not job_skills:
        return NO_JOB_SKILLS_SCORE

    overlap = skills_overlap(profile_skills, job_skills)
    return len(overlap.matched) / len(job_skills) * 100


def education_score(education: Iterable[EducationEntry]) -> float:
    education = list(education)
    if not education:
        return NO_EDUCATION_SCORE

    for entry in education:
        field_of_study = (entry.field_of_study or "").lower()
        degree = (entry.degree or "").lower()
        if any(k in field_of_study or k in degree for k in RELEVANT_EDUCATION_KEYWORDS):
            return RELEVANT_EDUCATION_SCORE
        if any(k in degree for k in ADVANCED_DEGREE_KEYWORDS):
            return RELEVANT_EDUCATION_SCORE

    return OTHER_EDUCATION_SCORE


def _entry_years(entry: WorkExperience, today: date) -> float:
    if entry.current:
        end = today
    elif entry.end_date is not None:
        end = entry.end_date
    else:
        # Ended position with no end date recorded
        return 0.0

    days = (end - entry.start_date).days
    return max(0.0, days / DAYS_PER_YEAR)


def total_experience_years(
    work_experience: Iterable[WorkExperience], today: Optional[date] = None
) -> float:
    """Sum of all entry durations in years, rounded to one decimal.

    Args:
        work_experience: Seeker's work history
        today: End date for current positions (defaults to today's UTC date)

    Returns:
        Total years of experience (never negative)
    """
    today = today or utc_today()
    total = sum(_entry_years(entry, today) for entry in work_experience)
    return round(total, 1)


def experience_tier_matches(experience_level: str, years: float) -> bool:
    """Whether years of experience fit the posting's seniority band."""
    if experience_level == "entry":
        return years <= 2
    if experience_level == "mid":
        return 2 <= years <= 5
    if experience_level == "senior":
        return years >= 5
    return False


def experience_score(
    work_experience: Iterable[WorkExperience],
    experience_level: str,
    today: Optional[date] = None,
) -> float:
    """Score how well the seeker's years fit the posting's seniority.

    Rules are checked in order, first match wins:
    entry <= 2 / mid 2..5 / senior >= 5 -> 90, entry > 2 -> 70,
    mid < 2 -> 60, senior < 5 -> 50, anything else -> 40.
    """
    work_experience = list(work_experience)
    if not work_experience:
        return NO_EXPERIENCE_SCORE

    years = total_experience_years(work_experience, today)

    if experience_tier_matches(experience_level, years):
        return 90
    if experience_level == "entry" and years > 2:
        return 70
    if experience_level == "mid" and years < 2:
        return 60
    if experience_level == "senior" and years < 5:
        return 50
    return 40


def is_remote_compatible(remote_preference: str, job_type: str) -> bool:
    if remote_preference == "flexible":
        return True
    return job_type in REMOTE_COMPATIBILITY.get(remote_preference, set())


def location_matches(work_locations: Iterable[str], job_location: Optional[str]) -> bool:
    """True if any preferred location appears inside the job's location text."""
    job_location = (job_location or "").lower()
    return any(location.lower() in job_location for location in work_locations)


def preferences_score(preferences: JobPreferences, job: JobPosting) -> float:
    """Adjust a neutral 50 up or down for each preference the seeker has set."""
    score = PREFERENCES_BASE_SCORE

    if preferences.job_types:
        score += 20 if job.type in preferences.job_types else -10

    if preferences.work_locations:
        score += 15 if location_matches(preferences.work_locations, job.location) else -5

    if preferences.remote_preference:
        score += 15 if is_remote_compatible(preferences.remote_preference, job.type) else -5

    return min(100, max(0, score))


def score_breakdown(
    profile: SeekerProfile, job: JobPosting, today: Optional[date] = None
) -> ScoreBreakdown:
    """Compute every sub-score and the final total for a profile/job pair."""
    today = today or utc_today()

    skills = skills_score(profile.skills, job.skills)
    education = education_score(profile.education)
    experience = experience_score(profile.work_experience, job.experience_level, today)
    preferences = preferences_score(profile.job_preferences, job)

    weighted = (
        skills * SKILLS_WEIGHT
        + education * EDUCATION_WEIGHT
        + experience * EXPERIENCE_WEIGHT
        + preferences * PREFERENCES_WEIGHT
    )
    total = min(round_half_up(weighted), 100)

    return ScoreBreakdown(
        skills=skills,
        education=education,
        experience=experience,
        preferences=preferences,
        total=total,
    )


def calculate_match_score(
    profile: SeekerProfile, job: JobPosting, today: Optional[date] = None
) -> int:
    """Integer match score in [0, 100] for a profile/job pair."""
    return score_breakdown(profile, job, today).total
