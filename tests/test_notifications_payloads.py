"""Unit tests for in-app notification and real-time payload builders."""

from datetime import datetime, timezone

import pytest

from emirimo.domain.models import Notification
from emirimo.matching.models import JobRecommendation, MatchResult
from emirimo.notifications.payloads import (
    build_digest_notification,
    build_realtime_payload,
    build_recommendation_notification,
)
from tests.helpers import make_job, make_seeker


@pytest.fixture
def seeker():
    return make_seeker("u-1", name="Aline Uwase")


@pytest.fixture
def job():
    return make_job("job-7", title="Data Analyst")


@pytest.fixture
def match_result():
    return MatchResult(
        score=82,
        reasons=["Matches 2 required skills: Python, SQL", "Perfect for entry-level position"],
        skills_match=["Python", "SQL"],
        skills_gap=[],
    )


class TestRecommendationNotification:
    def test_fields(self, seeker, job, match_result):
        notification = build_recommendation_notification(seeker, job, match_result)

        assert notification.user_id == "u-1"
        assert notification.message == (
            "New job recommendation: Data Analyst at Kigali Analytics Ltd (82% match)"
        )
        assert notification.type == "job_recommendation"
        assert notification.priority == "high"
        assert notification.action_url == "/jobs/job-7"
        assert notification.data == {
            "job_id": "job-7",
            "match_score": 82,
            "reasons": match_result.reasons,
        }
        assert notification.read_status is False
        assert notification.id is None

    def test_missing_employer_name(self, seeker, match_result):
        job = make_job("job-8", title="Driver", employer_name=None)

        notification = build_recommendation_notification(seeker, job, match_result)

        assert notification.message == "New job recommendation: Driver at an employer (82% match)"


class TestDigestNotification:
    def recommendations(self, count):
        return [
            JobRecommendation(job=make_job(f"job-{i}"), score=90 - i, reasons=[])
            for i in range(count)
        ]

    def test_weekly_digest(self, seeker):
        notification = build_digest_notification(seeker, self.recommendations(3))

        assert notification.title == "Weekly job digest"
        assert notification.message == "Your weekly digest: 3 jobs picked for you"
        assert notification.priority == "medium"
        assert notification.data == {
            "job_ids": ["job-0", "job-1", "job-2"],
            "match_scores": [90, 89, 88],
        }
        assert notification.action_url == "/recommendations/jobs"

    def test_weekly_digest_singular(self, seeker):
        notification = build_digest_notification(seeker, self.recommendations(1))
        assert notification.message == "Your weekly digest: 1 job picked for you"

    @pytest.mark.parametrize(
        "count,message",
        [
            (1, "1 recommended job is waiting for your application"),
            (2, "2 recommended jobs are waiting for your application"),
        ],
    )
    def test_reminder(self, seeker, count, message):
        notification = build_digest_notification(
            seeker, self.recommendations(count), reminder=True
        )

        assert notification.title == "Jobs waiting for you"
        assert notification.message == message


def test_realtime_payload():
    notification = Notification(
        id=12,
        user_id="u-1",
        title="New job recommendation",
        message="New job recommendation: Data Analyst at Kigali Analytics Ltd (82% match)",
        type="job_recommendation",
        priority="high",
        data={"job_id": "job-7"},
        action_url="/jobs/job-7",
        created_at=datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc),
    )

    payload = build_realtime_payload(notification)

    assert payload == {
        "event": "notification",
        "id": 12,
        "title": "New job recommendation",
        "message": "New job recommendation: Data Analyst at Kigali Analytics Ltd (82% match)",
        "type": "job_recommendation",
        "priority": "high",
        "data": {"job_id": "job-7"},
        "action_url": "/jobs/job-7",
        "created_at": "2025-06-01T08:30:00.000000Z",
    }
