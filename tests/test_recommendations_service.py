"""Unit tests for the recommendation facade."""

from unittest.mock import Mock

import pytest

from emirimo.matching.engine import MatchEngine
from emirimo.persistence.exceptions import PersistenceError
from emirimo.recommendations import (
    JobNotFoundError,
    NotASeekerError,
    RecommendationService,
)
from tests.helpers import FakeJobStore, FakeProfileStore, make_job, make_seeker
from tests.helpers.factories import REFERENCE_DAY


@pytest.fixture
def profile_store():
    return FakeProfileStore(
        [
            make_seeker("u-1", name="Aline Uwase", skills=["Python", "SQL"]),
            make_seeker("u-2", skills=["Excel"]),
            make_seeker("e-1", role="employer"),
        ]
    )


@pytest.fixture
def job_store():
    return FakeJobStore(
        [
            make_job("job-1", title="Data Analyst", skills=["Python", "SQL"], experience_level="entry"),
            make_job("job-2", title="Accountant", skills=["Excel"], experience_level="entry"),
            make_job("job-3", title="Closed", is_active=False),
        ]
    )


@pytest.fixture
def service(profile_store, job_store):
    return RecommendationService(
        profile_store,
        job_store,
        engine=MatchEngine(today_provider=lambda: REFERENCE_DAY),
        default_limit=10,
    )


class TestJobRecommendations:
    def test_response_shape(self, service):
        response = service.get_job_recommendations("u-1")

        assert response["success"] is True
        assert response["count"] == len(response["recommendations"]) == 2
        first = response["recommendations"][0]
        assert first["job"]["id"] == "job-1"
        assert set(first) == {"job", "score", "reasons"}

    def test_limit(self, service):
        response = service.get_job_recommendations("u-1", limit=1)
        assert response["count"] == 1

    def test_unknown_user_gets_empty_list(self, service):
        response = service.get_job_recommendations("nonexistent-id")
        assert response == {"success": True, "recommendations": [], "count": 0}

    def test_employer_gets_empty_list(self, service):
        assert service.get_job_recommendations("e-1")["count"] == 0


class TestJobMatch:
    def test_match_details(self, service):
        response = service.get_job_match("u-1", "job-1")

        assert response["success"] is True
        assert response["job_id"] == "job-1"
        assert response["score"] == 59
        assert response["match_level"] == "fair"
        assert response["skills_match"] == ["Python", "SQL"]
        assert response["skills_gap"] == []
        assert response["reasons"] == [
            "Matches 2 required skills: Python, SQL",
            "Perfect for entry-level position",
        ]

    def test_unknown_job(self, service):
        with pytest.raises(JobNotFoundError) as exc_info:
            service.get_job_match("u-1", "missing")
        assert exc_info.value.status_code == 404

    def test_unknown_job_checked_before_user(self, service):
        with pytest.raises(JobNotFoundError):
            service.get_job_match("nobody", "missing")

    def test_unknown_user(self, service):
        with pytest.raises(NotASeekerError) as exc_info:
            service.get_job_match("nobody", "job-1")
        assert exc_info.value.status_code == 400

    def test_employer_is_not_a_seeker(self, service):
        with pytest.raises(NotASeekerError):
            service.get_job_match("e-1", "job-1")

    def test_inactive_job_can_still_be_scored(self, service):
        assert service.get_job_match("u-1", "job-3")["job_id"] == "job-3"

    def test_store_failure_propagates(self, profile_store):
        job_store = Mock()
        job_store.get_by_id.side_effect = PersistenceError("database locked")
        service = RecommendationService(profile_store, job_store)

        with pytest.raises(PersistenceError):
            service.get_job_match("u-1", "job-1")


class TestTopCandidates:
    def test_ranked_seekers(self, service):
        response = service.get_top_candidates("job-2")

        assert response["success"] is True
        assert [c["seeker"]["id"] for c in response["candidates"]] == ["u-2", "u-1"]
        assert response["candidates"][0]["seeker"]["skills"] == ["Excel"]

    def test_unknown_job(self, service):
        assert service.get_top_candidates("missing") == {
            "success": True,
            "candidates": [],
            "count": 0,
        }
