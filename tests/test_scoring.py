"""Unit tests for the match score calculator."""

from datetime import date

import pytest

from emirimo.domain.models import EducationEntry, JobPreferences, WorkExperience
from emirimo.matching.scoring import (
    calculate_match_score,
    education_score,
    experience_score,
    is_remote_compatible,
    preferences_score,
    round_half_up,
    score_breakdown,
    skills_score,
    total_experience_years,
)
from tests.helpers import make_job, make_seeker
from tests.helpers.factories import REFERENCE_DAY


def years_ago(start: str, end: str = None, current: bool = False) -> WorkExperience:
    return WorkExperience(
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end) if end else None,
        current=current,
    )


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert round_half_up(38.5) == 39
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_half_up(38.4999) == 38
        assert round_half_up(40.25) == 40

    def test_integer_unchanged(self):
        assert round_half_up(72.0) == 72


class TestSkillsScore:
    def test_no_job_skills_is_neutral(self):
        assert skills_score(["Python"], []) == 50

    def test_fraction_of_job_skills_matched(self):
        score = skills_score(["python", "MySQL"], ["Python", "SQL", "Excel", "Tableau"])
        assert score == 50.0

    def test_containment_works_both_ways(self):
        assert skills_score(["JavaScript"], ["Java"]) == 100.0
        assert skills_score(["Java"], ["JavaScript"]) == 100.0

    def test_no_profile_skills(self):
        assert skills_score([], ["Python", "SQL"]) == 0.0


class TestEducationScore:
    def test_no_education(self):
        assert education_score([]) == 30

    @pytest.mark.parametrize(
        "degree,field_of_study",
        [
            ("Diploma", "Computer Science"),
            ("Certificate", "Information Technology"),
            ("Advanced Diploma", "Business Administration"),
            ("Diploma", "Civil Engineering"),
            ("Bachelor of Arts", "History"),
            ("Master of Arts", "History"),
        ],
    )
    def test_relevant_education(self, degree, field_of_study):
        entry = EducationEntry(degree=degree, field_of_study=field_of_study)
        assert education_score([entry]) == 80

    def test_other_education(self):
        entry = EducationEntry(degree="Certificate", field_of_study="Music")
        assert education_score([entry]) == 40

    def test_missing_fields_count_as_other(self):
        assert education_score([EducationEntry()]) == 40

    def test_any_relevant_entry_wins(self):
        entries = [
            EducationEntry(degree="Certificate", field_of_study="Music"),
            EducationEntry(degree="Diploma", field_of_study="Computer Science"),
        ]
        assert education_score(entries) == 80


class TestTotalExperienceYears:
    def test_sums_entries_and_rounds_to_one_decimal(self):
        entries = [
            years_ago("2020-01-01", "2021-01-01"),
            years_ago("2023-01-01", "2023-07-01"),
        ]
        assert total_experience_years(entries, REFERENCE_DAY) == 1.5

    def test_current_entry_runs_to_today(self):
        entries = [years_ago("2022-06-01", current=True)]
        assert total_experience_years(entries, REFERENCE_DAY) == 3.0

    def test_current_entry_ignores_end_date(self):
        entry = WorkExperience(
            start_date=date(2024, 6, 1), end_date=date(2024, 7, 1), current=True
        )
        assert entry.end_date is None
        assert total_experience_years([entry], REFERENCE_DAY) == 1.0

    def test_ended_entry_without_end_date_counts_zero(self):
        entries = [years_ago("2015-01-01")]
        assert total_experience_years(entries, REFERENCE_DAY) == 0.0

    def test_negative_durations_are_clamped(self):
        entries = [years_ago("2024-01-01", "2023-01-01"), years_ago("2024-06-01", "2025-06-01")]
        assert total_experience_years(entries, REFERENCE_DAY) == 1.0


class TestExperienceScore:
    def test_no_experience_short_circuits(self):
        assert experience_score([], "entry", REFERENCE_DAY) == 20
        assert experience_score([], "senior", REFERENCE_DAY) == 20

    @pytest.mark.parametrize(
        "level,start,expected",
        [
            ("entry", "2024-06-01", 90),  # 1 year
            ("entry", "2022-06-01", 70),  # 3 years
            ("mid", "2024-06-01", 60),
            ("mid", "2022-06-01", 90),
            ("mid", "2019-06-01", 40),  # 6 years
            ("senior", "2022-06-01", 50),
            ("senior", "2019-06-01", 90),
            ("lead", "2022-06-01", 40),
        ],
    )
    def test_rule_table(self, level, start, expected):
        entries = [years_ago(start, "2025-06-01")]
        assert experience_score(entries, level, REFERENCE_DAY) == expected

    def test_mid_band_is_inclusive(self):
        two_years = [years_ago("2023-06-01", "2025-06-01")]
        assert total_experience_years(two_years, REFERENCE_DAY) == 2.0
        assert experience_score(two_years, "mid", REFERENCE_DAY) == 90
        assert experience_score(two_years, "entry", REFERENCE_DAY) == 90

    def test_malformed_entry_scores_as_zero_years(self):
        entries = [years_ago("2015-01-01")]
        assert experience_score(entries, "mid", REFERENCE_DAY) == 60


class TestPreferencesScore:
    def test_no_preferences_is_neutral(self):
        job = make_job(type="onsite", location="Huye")
        assert preferences_score(JobPreferences(), job) == 50

    def test_all_preferences_met(self):
        job = make_job(type="hybrid", location="Kigali, Rwanda")
        prefs = JobPreferences(
            job_types=["hybrid"], work_locations=["kigali"], remote_preference="hybrid"
        )
        assert preferences_score(prefs, job) == 100

    def test_mixed_preferences(self):
        job = make_job(type="hybrid", location="Kigali, Rwanda")
        prefs = JobPreferences(
            job_types=["hybrid"], work_locations=["kigali"], remote_preference="remote"
        )
        assert preferences_score(prefs, job) == 80

    def test_all_preferences_missed(self):
        job = make_job(type="hybrid", location="Kigali, Rwanda")
        prefs = JobPreferences(
            job_types=["onsite"], work_locations=["Musanze"], remote_preference="onsite"
        )
        assert preferences_score(prefs, job) == 30

    def test_missing_job_location_never_matches(self):
        job = make_job(location=None)
        prefs = JobPreferences(work_locations=["Kigali"])
        assert preferences_score(prefs, job) == 45

    @pytest.mark.parametrize(
        "preference,job_type,expected",
        [
            ("flexible", "onsite", True),
            ("flexible", "remote", True),
            ("remote", "remote", True),
            ("remote", "hybrid", False),
            ("onsite", "onsite", True),
            ("onsite", "remote", False),
            ("hybrid", "hybrid", True),
            ("hybrid", "remote", True),
            ("hybrid", "onsite", False),
        ],
    )
    def test_remote_compatibility(self, preference, job_type, expected):
        assert is_remote_compatible(preference, job_type) is expected


class TestCalculateMatchScore:
    def test_empty_profile_against_neutral_job(self):
        """20 + 6 + 5 + 7.5 = 38.5, rounded half-up."""
        profile = make_seeker()
        job = make_job(skills=[], experience_level="mid")

        assert calculate_match_score(profile, job, REFERENCE_DAY) == 39

    def test_strong_match(self):
        profile = make_seeker(
            skills=["Python", "SQL"],
            education=[{"degree": "Bachelor", "field_of_study": "Computer Science"}],
            work_experience=[{"start_date": "2024-06-01", "current": True}],
            job_preferences={"job_types": ["remote"], "remote_preference": "remote"},
        )
        job = make_job(skills=["Python", "SQL"], experience_level="entry")

        breakdown = score_breakdown(profile, job, REFERENCE_DAY)

        assert breakdown.skills == 100.0
        assert breakdown.education == 80
        assert breakdown.experience == 90
        assert breakdown.preferences == 85
        # 40 + 16 + 22.5 + 12.75 = 91.25
        assert breakdown.total == 91

    def test_score_stays_in_range(self):
        profile = make_seeker(
            skills=["Python", "SQL", "Excel"],
            education=[{"degree": "Master", "field_of_study": "Engineering"}],
            work_experience=[{"start_date": "2018-01-01", "current": True}],
            job_preferences={
                "job_types": ["onsite"],
                "work_locations": ["Kigali"],
                "remote_preference": "flexible",
            },
        )
        job = make_job(
            skills=["Python"], experience_level="senior", type="onsite", location="Kigali"
        )

        score = calculate_match_score(profile, job, REFERENCE_DAY)

        assert score == 94
        assert 0 <= score <= 100

    def test_missing_experience_level_defaults_to_mid(self):
        job = make_job(experience_level=None)
        assert job.experience_level == "mid"
        assert make_job(experience_level="  Senior ").experience_level == "senior"

    def test_unrecognized_experience_level_scores_forty(self):
        profile = make_seeker(work_experience=[{"start_date": "2020-01-01", "current": True}])
        job = make_job(skills=[], experience_level="lead")

        breakdown = score_breakdown(profile, job, REFERENCE_DAY)

        assert job.experience_level == "lead"
        assert breakdown.experience == 40

    def test_partial_skill_overlap_without_other_data(self):
        """One of two job skills matched: 20 + 6 + 5 + 7.5 = 38.5, rounded half-up."""
        profile = make_seeker(skills=["javascript", "react"])
        job = make_job(skills=["JavaScript", "Node.js"])

        breakdown = score_breakdown(profile, job, REFERENCE_DAY)

        assert breakdown.skills == 50.0
        assert breakdown.education == 30
        assert breakdown.experience == 20
        assert breakdown.preferences == 50
        assert breakdown.total == 39
        assert calculate_match_score(profile, job, REFERENCE_DAY) == 39

    def test_is_deterministic(self):
        profile = make_seeker(skills=["Python"])
        job = make_job(skills=["Python", "Go"])
        first = calculate_match_score(profile, job, REFERENCE_DAY)
        assert all(calculate_match_score(profile, job, REFERENCE_DAY) == first for _ in range(5))
