"""Builders for in-app notifications and real-time push payloads."""

from typing import Any, Dict, List

from emirimo.domain.models import (
    JobPosting,
    Notification,
    NotificationPriority,
    NotificationType,
    SeekerProfile,
)
from emirimo.matching.models import JobRecommendation, MatchResult
from emirimo.utils.timestamps import format_timestamp


def build_recommendation_notification(
    profile: SeekerProfile, job: JobPosting, match_result: MatchResult
) -> Notification:
    """In-app notification telling a seeker about a newly posted job."""
    employer = job.employer_name or "an employer"
    return Notification(
        user_id=profile.id,
        title="New job recommendation",
        message=f"New job recommendation: {job.title} at {employer} ({match_result.score}% match)",
        type=NotificationType.JOB_RECOMMENDATION,
        priority=NotificationPriority.HIGH,
        data={
            "job_id": job.id,
            "match_score": match_result.score,
            "reasons": list(match_result.reasons),
        },
        action_url=f"/jobs/{job.id}",
    )


def build_digest_notification(
    profile: SeekerProfile, recommendations: List[JobRecommendation], reminder: bool = False
) -> Notification:
    """In-app notification summarising several recommended jobs."""
    count = len(recommendations)
    if reminder:
        verb = "jobs are" if count != 1 else "job is"
        message = f"{count} recommended {verb} waiting for your application"
        title = "Jobs waiting for you"
    else:
        message = f"Your weekly digest: {count} job{'s' if count != 1 else ''} picked for you"
        title = "Weekly job digest"

    return Notification(
        user_id=profile.id,
        title=title,
        message=message,
        type=NotificationType.JOB_RECOMMENDATION,
        priority=NotificationPriority.MEDIUM,
        data={
            "job_ids": [rec.job.id for rec in recommendations],
            "match_scores": [rec.score for rec in recommendations],
        },
        action_url="/recommendations/jobs",
    )


def build_realtime_payload(notification: Notification) -> Dict[str, Any]:
    """Shape pushed to connected clients when a notification is created."""
    return {
        "event": "notification",
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "priority": notification.priority,
        "data": notification.data,
        "action_url": notification.action_url,
        "created_at": format_timestamp(notification.created_at),
    }
