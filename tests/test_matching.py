"""Unit tests for skill overlap, match reasons, the match engine and payloads."""

from unittest.mock import Mock

import pytest

from emirimo.matching.engine import MatchEngine
from emirimo.matching.models import MatchResult, match_level
from emirimo.matching.reasons import get_match_reasons
from emirimo.matching.skills import skill_matches, skills_overlap
from emirimo.matching.utils import build_digest_payload, build_recommendation_payload
from tests.helpers import make_job, make_seeker
from tests.helpers.factories import REFERENCE_DAY


@pytest.fixture
def strong_seeker():
    return make_seeker(
        "u-strong",
        name="Aline Uwase",
        skills=["Python", "SQL"],
        education=[{"degree": "Bachelor", "field_of_study": "Computer Science"}],
        work_experience=[{"start_date": "2024-06-01", "current": True}],
        job_preferences={"work_locations": ["remote"]},
    )


class TestSkills:
    def test_skill_matches_is_case_insensitive(self):
        assert skill_matches("PYTHON", "python")

    def test_skill_matches_substring_either_direction(self):
        assert skill_matches("SQL", "PostgreSQL")
        assert skill_matches("PostgreSQL", "sql")
        assert not skill_matches("Go", "Rust")

    def test_overlap_partitions_job_skills_in_job_order(self):
        overlap = skills_overlap(["JavaScript"], ["Java", "Docker", "AWS"])

        assert overlap.matched == ["Java"]
        assert overlap.gap == ["Docker", "AWS"]

    def test_overlap_keeps_duplicates(self):
        overlap = skills_overlap(["python"], ["Python", "Python", "Go"])

        assert overlap.matched == ["Python", "Python"]
        assert overlap.gap == ["Go"]

    def test_overlap_with_no_profile_skills(self):
        overlap = skills_overlap([], ["Excel"])

        assert overlap.matched == []
        assert overlap.gap == ["Excel"]


class TestMatchReasons:
    def test_all_reasons_in_order(self, strong_seeker):
        job = make_job(skills=["Python", "SQL", "Excel"], experience_level="entry", location="Remote")

        reasons = get_match_reasons(strong_seeker, job, REFERENCE_DAY)

        assert reasons == [
            "Matches 2 required skills: Python, SQL",
            "Perfect for entry-level position",
            "Has relevant educational background",
            "Matches preferred work location",
        ]

    def test_skill_reason_uses_job_skill_strings(self):
        seeker = make_seeker(skills=["postgresql"])
        job = make_job(skills=["SQL"], experience_level="senior")

        reasons = get_match_reasons(seeker, job, REFERENCE_DAY)

        assert reasons[0] == "Matches 1 required skills: SQL"

    def test_no_experience_still_fits_entry_level(self):
        seeker = make_seeker()
        job = make_job(experience_level="entry")

        assert get_match_reasons(seeker, job, REFERENCE_DAY) == ["Perfect for entry-level position"]

    def test_no_experience_does_not_fit_mid_level(self):
        seeker = make_seeker()
        job = make_job(experience_level="mid")

        assert get_match_reasons(seeker, job, REFERENCE_DAY) == []

    @pytest.mark.parametrize(
        "level,start,message",
        [
            ("mid", "2022-06-01", "Matches mid-level experience requirements"),
            ("senior", "2019-06-01", "Meets senior-level experience requirements"),
        ],
    )
    def test_experience_tier_messages(self, level, start, message):
        seeker = make_seeker(work_experience=[{"start_date": start, "end_date": "2025-06-01"}])
        job = make_job(experience_level=level)

        assert message in get_match_reasons(seeker, job, REFERENCE_DAY)

    def test_business_degree_scores_but_is_not_a_reason(self):
        seeker = make_seeker(education=[{"degree": "Diploma", "field_of_study": "Business"}])
        job = make_job(experience_level="senior")

        assert "Has relevant educational background" not in get_match_reasons(
            seeker, job, REFERENCE_DAY
        )

    def test_location_reason_requires_preference(self):
        seeker = make_seeker(job_preferences={"work_locations": []})
        job = make_job(location="Kigali", experience_level="senior")

        assert get_match_reasons(seeker, job, REFERENCE_DAY) == []


class TestMatchLevel:
    @pytest.mark.parametrize(
        "score,level",
        [(100, "excellent"), (80, "excellent"), (79, "good"), (60, "good"), (59, "fair"), (40, "fair"), (39, "poor"), (0, "poor")],
    )
    def test_buckets(self, score, level):
        assert match_level(score) == level


class TestMatchEngine:
    def test_evaluate_combines_score_reasons_and_skills(self, strong_seeker):
        engine = MatchEngine(today_provider=lambda: REFERENCE_DAY)
        job = make_job(skills=["Python", "SQL", "Excel"], experience_level="entry")

        result = engine.evaluate(strong_seeker, job)

        assert isinstance(result, MatchResult)
        assert result.skills_match == ["Python", "SQL"]
        assert result.skills_gap == ["Excel"]
        assert result.reasons[0] == "Matches 2 required skills: Python, SQL"
        assert result.breakdown.total == result.score
        assert result.match_level == match_level(result.score)

    def test_explicit_day_overrides_provider(self, strong_seeker):
        provider = Mock(return_value=REFERENCE_DAY)
        engine = MatchEngine(today_provider=provider)

        engine.evaluate(strong_seeker, make_job(), today=REFERENCE_DAY)

        provider.assert_not_called()

    def test_to_dict_shape(self, strong_seeker):
        engine = MatchEngine(today_provider=lambda: REFERENCE_DAY)
        result = engine.evaluate(strong_seeker, make_job(skills=["Python"]))

        assert set(result.to_dict()) == {"score", "reasons", "match_level", "skills_match", "skills_gap"}


class TestPayloads:
    def test_recommendation_payload(self, strong_seeker):
        engine = MatchEngine(today_provider=lambda: REFERENCE_DAY)
        job = make_job(skills=["Python", "Go"], location=None)
        result = engine.evaluate(strong_seeker, job)

        payload = build_recommendation_payload(strong_seeker, job, result)

        assert payload["user"] == {"id": "u-strong", "name": "Aline Uwase", "email": "u-strong@example.rw"}
        assert payload["job"]["location"] == "Remote"
        assert payload["score"] == result.score
        assert payload["skills_match"] == ["Python"]
        assert payload["skills_gap"] == ["Go"]

    def test_digest_payload(self, strong_seeker):
        from emirimo.matching.models import JobRecommendation

        recs = [
            JobRecommendation(job=make_job("job-1"), score=85, reasons=["a"]),
            JobRecommendation(job=make_job("job-2"), score=45, reasons=[]),
        ]

        payload = build_digest_payload(strong_seeker, recs)

        assert payload["count"] == 2
        assert [r["match_level"] for r in payload["recommendations"]] == ["excellent", "fair"]
