"""Fuzzy skill comparison shared by scoring, reasons and payloads.

Two skills match when either one, lowercased, contains the other. This is
deliberately loose: "Java" matches "JavaScript" and "SQL" matches "MySQL".
"""

from typing import Iterable, List, NamedTuple


class SkillsOverlap(NamedTuple):
    """Partition of a job's required skills against a seeker's skills.

    Both lists hold the job's own skill strings in the job's order.
    """

    matched: List[str]
    gap: List[str]


def skill_matches(first: str, second: str) -> bool:
    """Return True if either skill contains the other, ignoring case."""
    a = first.lower()
    b = second.lower()
    return a in b or b in a


def has_skill(profile_skills: Iterable[str], job_skill: str) -> bool:
    """Return True if any of the seeker's skills matches the job skill."""
    return any(skill_matches(skill, job_skill) for skill in profile_skills)


def skills_overlap(profile_skills: Iterable[str], job_skills: Iterable[str]) -> SkillsOverlap:
    """Split job skills into those the seeker covers and those they lack.

    Args:
        profile_skills: Seeker's skill names
        job_skills: Job's required skill names (order preserved, duplicates kept)

    Returns:
        SkillsOverlap with matched and gap lists
    """
    profile_skills = list(profile_skills)
    matched: List[str] = []
    gap: List[str] = []
    for job_skill in job_skills:
        if has_skill(profile_skills, job_skill):
            matched.append(job_skill)
        else:
            gap.append(job_skill)
    return SkillsOverlap(matched=matched, gap=gap)
